"""
Report ledger.

Reports are append-only references to off-chain content.  Writing a
report appends to the patient's report list and to the author's history
in one transaction; if either append fails neither is kept.
"""
from __future__ import annotations

from ledger.guards import is_registered_doctor, is_self_or_authorized_doctor, requires
from ledger.models import AuditEvent, Doctor, MedicalReport
from ledger.services.audit import log_event
from ledger.services.identities import get_patient
from ledger.services.ledger import serialized


def format_report(report: MedicalReport) -> dict:
    return {
        'patient': report.patient_id,
        'doctor': report.doctor_id,
        'reportNumber': report.report_number,
        'date': report.date,
        'contentHash': report.content_hash,
    }


def _append_report_history(doctor: Doctor, content_hash: str) -> None:
    doctor.report_history = [*doctor.report_history, content_hash]
    doctor.save(update_fields=['report_history', 'updated_at'])


# Any registered doctor may write for any patient; authorization for
# the patient is only enforced on reads.
@serialized
@requires(is_registered_doctor)
def write_report(caller: str, patient_id: str, report_number: int, date: str, content_hash: str) -> MedicalReport:
    patient = get_patient(patient_id)
    doctor = Doctor.objects.select_for_update().get(wallet=caller)
    report = MedicalReport.objects.create(
        patient=patient,
        doctor=doctor,
        report_number=report_number,
        date=date,
        content_hash=content_hash,
    )
    _append_report_history(doctor, content_hash)
    log_event(
        kind=AuditEvent.KIND_REPORT_ADDED, actor=caller, subject=patient_id,
        payload=format_report(report),
    )
    return report


@requires(is_self_or_authorized_doctor)
def get_medical_reports(caller: str, patient_id: str) -> list[MedicalReport]:
    patient = get_patient(patient_id)
    return list(MedicalReport.objects.filter(patient=patient).order_by('id'))
