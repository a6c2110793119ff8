"""
Serialisation of ledger mutations.

Every state-changing operation runs inside :func:`serialized`: one
database transaction that starts by locking the :class:`LedgerHead`
row.  Writers therefore commit one at a time, readers keep seeing the
last committed state, and any exception (a failed guard, a failed
invariant, a database error) rolls the whole operation back.
"""
from __future__ import annotations

import functools

from django.db import transaction

from ledger.models import LedgerHead


def lock_head() -> LedgerHead:
    """Return the ledger head locked for the current transaction."""
    head, _ = LedgerHead.objects.select_for_update().get_or_create(pk=1)
    return head


def serialized(func):
    """Run ``func`` as a single all-or-nothing ledger mutation.

    Apply it outside :func:`ledger.guards.requires` so guards are
    evaluated while the write lock is held.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with transaction.atomic():
            lock_head()
            return func(*args, **kwargs)
    return wrapper
