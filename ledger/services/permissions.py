"""
Permission roster operations.

A patient (or the administrator acting for it) grants and revokes a
doctor's standing permission to read the patient's records.  Grants are
idempotent; revoking keeps the order of the remaining doctors.
"""
from __future__ import annotations

import logging

from ledger.guards import is_self_or_administrator, is_self_or_authorized_doctor, requires
from ledger.models import AuditEvent, Patient
from ledger.roster import PermissionRoster
from ledger.services.audit import log_event
from ledger.services.identities import get_doctor, get_patient
from ledger.services.ledger import serialized

logger = logging.getLogger(__name__)


def load_roster(patient: Patient) -> PermissionRoster:
    return PermissionRoster(patient.authorized_doctors or ())


def _store_roster(patient: Patient, roster: PermissionRoster) -> None:
    patient.authorized_doctors = roster.as_list()
    patient.save(update_fields=['authorized_doctors', 'updated_at'])


@serialized
@requires(is_self_or_administrator)
def grant_permission(caller: str, patient_id: str, doctor_id: str) -> list[str]:
    patient = get_patient(patient_id, for_update=True)
    get_doctor(doctor_id)
    roster = load_roster(patient)
    if roster.grant(doctor_id):
        _store_roster(patient, roster)
        log_event(
            kind=AuditEvent.KIND_PERMISSION_GRANTED, actor=caller, subject=patient_id,
            payload={'doctor': doctor_id, 'position': len(roster) - 1},
        )
    else:
        logger.debug('doctor %s already granted by %s', doctor_id, patient_id)
    return roster.as_list()


@serialized
@requires(is_self_or_administrator)
def revoke_permission(caller: str, patient_id: str, doctor_id: str) -> list[str]:
    patient = get_patient(patient_id, for_update=True)
    roster = load_roster(patient)
    if roster.revoke(doctor_id):
        _store_roster(patient, roster)
        log_event(
            kind=AuditEvent.KIND_PERMISSION_REVOKED, actor=caller, subject=patient_id,
            payload={'doctor': doctor_id},
        )
    return roster.as_list()


@requires(is_self_or_authorized_doctor)
def get_patient_permissions(caller: str, patient_id: str) -> list[str]:
    return load_roster(get_patient(patient_id)).as_list()
