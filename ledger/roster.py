"""
Per-patient permission roster.

A patient's standing permissions are kept in two shapes at once: a
membership map answering "is this doctor granted?" in constant time,
and an ordered list used for display and audit.  :class:`PermissionRoster`
owns both and exposes a single grant/revoke entry point so the two can
never drift apart: a doctor is granted if and only if it appears exactly
once in the ordered list.

Only the ordered list is persisted (``Patient.authorized_doctors``); the
membership map is rebuilt from it on load.
"""
from __future__ import annotations

from typing import Iterable, Iterator

from ledger.exceptions import InvariantViolation


class PermissionRoster:
    __slots__ = ('_granted_to', '_authorized')

    def __init__(self, doctors: Iterable[str] = ()) -> None:
        self._granted_to: dict[str, bool] = {}
        self._authorized: list[str] = []
        # Rows written before grant became idempotent may hold repeats;
        # replaying them through grant() collapses those to one entry.
        for doctor in doctors:
            self.grant(doctor)

    def __contains__(self, doctor: object) -> bool:
        return self._granted_to.get(doctor, False)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._authorized)

    def __len__(self) -> int:
        return len(self._authorized)

    def __repr__(self) -> str:
        return f"PermissionRoster({self._authorized!r})"

    def grant(self, doctor: str) -> bool:
        """Grant ``doctor``.  Returns False if it was already granted."""
        if self._granted_to.get(doctor):
            return False
        self._granted_to[doctor] = True
        self._authorized.append(doctor)
        self.check(doctor)
        return True

    def revoke(self, doctor: str) -> bool:
        """Revoke ``doctor`` keeping the order of everyone else.

        Returns False if the doctor was not granted.
        """
        if not self._granted_to.get(doctor):
            return False
        self._granted_to[doctor] = False
        items = self._authorized
        index = 0
        while index < len(items) and items[index] != doctor:
            index += 1
        if index == len(items):
            raise InvariantViolation(f'{doctor} granted but missing from roster')
        for j in range(index, len(items) - 1):
            items[j] = items[j + 1]
        items.pop()
        self.check(doctor)
        return True

    def check(self, doctor: str) -> None:
        """Assert the membership/list invariant for one doctor."""
        occurrences = self._authorized.count(doctor)
        expected = 1 if self._granted_to.get(doctor) else 0
        if occurrences != expected:
            raise InvariantViolation(
                f'roster inconsistent for {doctor}: granted={bool(expected)} occurrences={occurrences}'
            )

    def as_list(self) -> list[str]:
        return list(self._authorized)
