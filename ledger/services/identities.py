"""
Identity registry: doctors and patients.

Only the administrator registers identities.  Registering an identity
that already exists overwrites it: a doctor's active patients and report
history are reset, a patient's medical history and test results are
reset, but the patient's permission roster is left as it was.  Events
carry ``overwritten`` so indexers can tell the two cases apart.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db.models import Q

from ledger.exceptions import LedgerError, NotFound
from ledger.guards import (
    is_administrator,
    is_authorized_doctor,
    is_registered_doctor,
    is_self_or_authorized_doctor,
    requires,
)
from ledger.models import AuditEvent, Doctor, Patient
from ledger.services.audit import log_event
from ledger.services.ledger import serialized

logger = logging.getLogger(__name__)

DOCTOR_INFO_FIELDS = ('name', 'contact', 'experience_years', 'specialty', 'emergency_available', 'available_time')
PATIENT_INFO_FIELDS = ('conditions', 'medications', 'allergies')


def _pick(info: Mapping[str, Any], fields: tuple[str, ...]) -> dict[str, Any]:
    return {k: info[k] for k in fields if k in info}


def format_doctor(doctor: Doctor) -> dict:
    return {
        'wallet': doctor.wallet,
        'name': doctor.name,
        'contact': doctor.contact,
        'experienceYears': doctor.experience_years,
        'specialty': doctor.specialty,
        'emergencyAvailable': doctor.emergency_available,
        'availableTime': doctor.available_time,
    }


def format_patient(patient: Patient) -> dict:
    return {
        'wallet': patient.wallet,
        'conditions': patient.conditions,
        'medications': patient.medications,
        'allergies': patient.allergies,
        'medicalHistory': list(patient.medical_history),
        'testResults': list(patient.test_results),
    }


def get_doctor(wallet: str) -> Doctor:
    doctor = Doctor.objects.filter(wallet=wallet).first()
    if doctor is None:
        raise NotFound(f'doctor {wallet} is not registered')
    return doctor


def get_patient(wallet: str, *, for_update: bool = False) -> Patient:
    qs = Patient.objects.select_for_update() if for_update else Patient.objects
    patient = qs.filter(wallet=wallet).first()
    if patient is None:
        raise NotFound(f'patient {wallet} is not registered')
    return patient


@serialized
@requires(is_administrator)
def register_doctor(caller: str, wallet: str, info: Mapping[str, Any]) -> Doctor:
    fields = _pick(info, DOCTOR_INFO_FIELDS)
    doctor, created = Doctor.objects.update_or_create(
        wallet=wallet,
        defaults={**fields, 'active_patients': [], 'report_history': []},
    )
    log_event(
        kind=AuditEvent.KIND_DOCTOR_REGISTERED, actor=caller, subject=wallet,
        payload={**format_doctor(doctor), 'overwritten': not created},
    )
    if not created:
        logger.info('doctor %s re-registered; history and active patients reset', wallet)
    return doctor


@serialized
@requires(is_administrator)
def register_patient(caller: str, wallet: str, info: Mapping[str, Any]) -> Patient:
    fields = _pick(info, PATIENT_INFO_FIELDS)
    # authorized_doctors survives re-registration
    patient, created = Patient.objects.update_or_create(
        wallet=wallet,
        defaults={**fields, 'medical_history': [], 'test_results': []},
    )
    log_event(
        kind=AuditEvent.KIND_PATIENT_REGISTERED, actor=caller, subject=wallet,
        payload={**fields, 'overwritten': not created},
    )
    if not created and patient.authorized_doctors:
        logger.info('patient %s re-registered with %d standing grants', wallet, len(patient.authorized_doctors))
    return patient


def get_doctor_info(doctor_id: str) -> Doctor:
    return get_doctor(doctor_id)


def get_all_doctors(*, q: Optional[str] = None, emergency_only: bool = False) -> list[Doctor]:
    qs = Doctor.objects.all()
    if q:
        qs = qs.filter(Q(name__icontains=q) | Q(specialty__icontains=q))
    if emergency_only:
        qs = qs.filter(emergency_available=True)
    return list(qs.order_by('registered_at', 'wallet'))


@requires(is_registered_doctor)
def get_doctor_reports_history(caller: str) -> list[str]:
    return list(get_doctor(caller).report_history)


@requires(is_registered_doctor)
def get_active_patients(caller: str) -> list[str]:
    return list(get_doctor(caller).active_patients)


@serialized
@requires(is_registered_doctor, is_authorized_doctor)
def assign_active_patient(caller: str, patient_id: str) -> list[str]:
    """Add an authorized patient to the calling doctor's active list."""
    get_patient(patient_id)
    doctor = Doctor.objects.select_for_update().get(wallet=caller)
    if patient_id not in doctor.active_patients:
        doctor.active_patients = [*doctor.active_patients, patient_id]
        doctor.save(update_fields=['active_patients', 'updated_at'])
        log_event(kind=AuditEvent.KIND_ACTIVE_PATIENT_ASSIGNED, actor=caller, subject=patient_id)
    return list(doctor.active_patients)


@requires(is_self_or_authorized_doctor)
def get_patient_info(caller: str, patient_id: str) -> Patient:
    return get_patient(patient_id)


@requires(is_self_or_authorized_doctor)
def get_patient_test_results(caller: str, patient_id: str) -> list[str]:
    return list(get_patient(patient_id).test_results)


@serialized
@requires(is_registered_doctor, is_authorized_doctor)
def record_test_result(caller: str, patient_id: str, reference: str) -> list[str]:
    if not reference:
        raise LedgerError('test result reference must not be empty')
    patient = get_patient(patient_id, for_update=True)
    patient.test_results = [*patient.test_results, reference]
    patient.save(update_fields=['test_results', 'updated_at'])
    log_event(
        kind=AuditEvent.KIND_TEST_RESULT_RECORDED, actor=caller, subject=patient_id,
        payload={'reference': reference},
    )
    return list(patient.test_results)
