"""
Access guard predicates.

Each predicate is a plain function of the caller's wallet (and, where
relevant, the target patient) that reads the identity registry and the
permission roster but never writes.  Service operations declare the
predicates they need with :func:`requires`; all of them must hold before
the operation body runs, otherwise :class:`~ledger.exceptions.Unauthorized`
is raised and nothing is touched.
"""
from __future__ import annotations

import functools
import inspect
import logging
from typing import Callable, Optional

from django.conf import settings

from ledger.exceptions import Unauthorized
from ledger.models import Doctor, Patient
from ledger.roster import PermissionRoster

logger = logging.getLogger(__name__)


def administrator() -> str:
    """The administrator wallet fixed in configuration at start-up."""
    return getattr(settings, 'LEDGER_ADMINISTRATOR', '') or ''


def is_administrator(caller: Optional[str]) -> bool:
    admin = administrator()
    return bool(caller) and bool(admin) and caller == admin


def is_registered_doctor(caller: Optional[str]) -> bool:
    return bool(caller) and Doctor.objects.filter(wallet=caller).exists()


def is_registered_patient(caller: Optional[str]) -> bool:
    return bool(caller) and Patient.objects.filter(wallet=caller).exists()


def is_authorized_doctor(caller: Optional[str], patient_id: str) -> bool:
    if not caller:
        return False
    stored = Patient.objects.filter(wallet=patient_id).values_list('authorized_doctors', flat=True).first()
    return caller in PermissionRoster(stored or ())


def is_self_or_authorized_doctor(caller: Optional[str], patient_id: str) -> bool:
    if not caller:
        return False
    return caller == patient_id or is_authorized_doctor(caller, patient_id)


def is_self_or_administrator(caller: Optional[str], patient_id: str) -> bool:
    if not caller:
        return False
    return caller == patient_id or is_administrator(caller)


def requires(*predicates: Callable[..., bool]):
    """Decorate a service operation with guard predicates.

    Predicates receive the operation's arguments that match their own
    parameter names, so ``is_self_or_authorized_doctor(caller, patient_id)``
    guards any operation taking ``caller`` and ``patient_id``.
    """
    def decorator(func):
        signature = inspect.signature(func)
        wanted = [(p, tuple(inspect.signature(p).parameters)) for p in predicates]

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            arguments = bound.arguments
            for predicate, names in wanted:
                if not predicate(*(arguments[name] for name in names)):
                    logger.warning(
                        'guard %s rejected %s for caller %s',
                        predicate.__name__, func.__name__, arguments.get('caller') or '-',
                    )
                    raise Unauthorized(f'{func.__name__}: {predicate.__name__} does not hold')
            return func(*args, **kwargs)

        wrapper.guards = predicates
        return wrapper
    return decorator
