from __future__ import annotations

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")

Check = Callable[[T], None]


def run_checks(checks: Iterable[Check], subject: T) -> T:
    """Run checks in order; the first one to raise stops the pipeline."""
    for check in checks:
        check(subject)
    return subject
