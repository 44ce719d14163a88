"""Attendance & payroll rule engine.

This package is organized by feature modules (periods, attendance, overtime,
reimbursements, payroll) with a thin Flask controller layer and
service/repository layers underneath.
"""
