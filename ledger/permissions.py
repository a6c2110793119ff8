"""
DRF permission classes built on the ledger guard predicates.

These reject requests early at the HTTP layer; the service operations
still evaluate their own guards, so calling a service directly is never
less safe than going through a view.
"""
from rest_framework.permissions import BasePermission

from ledger.guards import is_administrator, is_registered_doctor, is_registered_patient


def caller_of(request) -> str:
    """Wallet of the authenticated caller, or an empty string."""
    user = getattr(request, "user", None)
    if not (user and user.is_authenticated):
        return ""
    return getattr(user, "wallet", None) or ""


class HasWallet(BasePermission):
    """Authenticated user bound to a ledger wallet."""
    message = "account is not bound to a wallet"

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return bool(caller_of(request))


class IsLedgerAdministrator(BasePermission):
    """Caller is the configured ledger administrator."""
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_administrator(caller_of(request))


class IsRegisteredDoctor(BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_registered_doctor(caller_of(request))


class IsRegisteredPatient(BasePermission):
    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        return is_registered_patient(caller_of(request))
