import pytest

from ledger.exceptions import LedgerError, NotFound, Unauthorized
from ledger.models import AuditEvent, Doctor, LedgerHead, MedicalReport, Patient
from ledger.services import identities, permissions, reports

from .conftest import ADMIN, D1, D2, D3, DOCTOR_INFO, P1, P2, PATIENT_INFO, STRANGER

pytestmark = pytest.mark.django_db


def kinds():
    return list(AuditEvent.objects.order_by('sequence').values_list('kind', flat=True))


# ---------------------------------------------------------------------
# Identity registry
# ---------------------------------------------------------------------
def test_only_administrator_registers_identities():
    for caller in (STRANGER, D1, P1, '', None):
        with pytest.raises(Unauthorized):
            identities.register_doctor(caller, D1, DOCTOR_INFO)
        with pytest.raises(Unauthorized):
            identities.register_patient(caller, P1, PATIENT_INFO)
    assert Doctor.objects.count() == 0
    assert Patient.objects.count() == 0
    assert AuditEvent.objects.count() == 0


def test_register_fails_when_no_administrator_configured(settings):
    settings.LEDGER_ADMINISTRATOR = ''
    with pytest.raises(Unauthorized):
        identities.register_doctor('', D1, DOCTOR_INFO)


def test_register_doctor_emits_event_with_info():
    doctor = identities.register_doctor(ADMIN, D1, DOCTOR_INFO)
    assert doctor.name == 'Alice Chen'
    assert doctor.report_history == [] and doctor.active_patients == []
    event = AuditEvent.objects.get()
    assert event.kind == AuditEvent.KIND_DOCTOR_REGISTERED
    assert event.actor == ADMIN and event.subject == D1
    assert event.payload['specialty'] == 'Cardiology'
    assert event.payload['overwritten'] is False
    assert event.sequence == 1
    assert LedgerHead.objects.get(pk=1).sequence == 1


def test_reregistering_doctor_resets_lists(registry):
    reports.write_report(D1, P1, 1, '2024-01-01', 'Qm1')
    permissions.grant_permission(P1, P1, D1)
    identities.assign_active_patient(D1, P1)

    doctor = identities.register_doctor(ADMIN, D1, {**DOCTOR_INFO, 'specialty': 'Neurology'})
    assert doctor.specialty == 'Neurology'
    assert doctor.report_history == []
    assert doctor.active_patients == []
    assert Doctor.objects.filter(wallet=D1).count() == 1
    assert AuditEvent.objects.filter(kind=AuditEvent.KIND_DOCTOR_REGISTERED).last().payload['overwritten'] is True
    # reports already written stay in the patient's ledger
    assert MedicalReport.objects.filter(patient_id=P1).count() == 1


def test_reregistering_patient_keeps_grants(registry):
    permissions.grant_permission(P1, P1, D1)
    identities.record_test_result(D1, P1, 'Qm-lab-1')

    patient = identities.register_patient(ADMIN, P1, {'conditions': 'asthma'})
    assert patient.conditions == 'asthma'
    assert patient.test_results == []
    assert permissions.get_patient_permissions(P1, P1) == [D1]
    assert identities.get_patient_info(D1, P1).wallet == P1


def test_get_all_doctors_in_registration_order(registry):
    identities.register_doctor(ADMIN, D1, DOCTOR_INFO)
    wallets = [d.wallet for d in identities.get_all_doctors()]
    assert wallets == [D1, D2, D3]


def test_get_all_doctors_filters(registry):
    identities.register_doctor(ADMIN, D2, {**DOCTOR_INFO, 'name': 'Bob Ortiz', 'specialty': 'Dermatology',
                                           'emergency_available': False})
    assert [d.wallet for d in identities.get_all_doctors(q='derma')] == [D2]
    assert [d.wallet for d in identities.get_all_doctors(q='carol')] == [D3]
    assert D2 not in [d.wallet for d in identities.get_all_doctors(emergency_only=True)]


def test_get_doctor_info_unknown_is_not_found(registry):
    assert identities.get_doctor_info(D1).name == 'Alice Chen'
    with pytest.raises(NotFound):
        identities.get_doctor_info(STRANGER)


def test_doctor_self_reads_require_registered_doctor(registry):
    assert identities.get_doctor_reports_history(D1) == []
    assert identities.get_active_patients(D1) == []
    for caller in (P1, STRANGER, ADMIN):
        with pytest.raises(Unauthorized):
            identities.get_doctor_reports_history(caller)
        with pytest.raises(Unauthorized):
            identities.get_active_patients(caller)


def test_assign_active_patient_requires_authorization(registry):
    with pytest.raises(Unauthorized):
        identities.assign_active_patient(D1, P1)
    permissions.grant_permission(P1, P1, D1)
    assert identities.assign_active_patient(D1, P1) == [P1]
    assert identities.assign_active_patient(D1, P1) == [P1]
    assert identities.get_active_patients(D1) == [P1]
    assert kinds().count(AuditEvent.KIND_ACTIVE_PATIENT_ASSIGNED) == 1


def test_record_test_result(registry):
    with pytest.raises(Unauthorized):
        identities.record_test_result(D2, P1, 'Qm-lab')
    permissions.grant_permission(P1, P1, D2)
    assert identities.record_test_result(D2, P1, 'Qm-lab') == ['Qm-lab']
    assert identities.get_patient_test_results(P1, P1) == ['Qm-lab']
    with pytest.raises(LedgerError):
        identities.record_test_result(D2, P1, '')


# ---------------------------------------------------------------------
# Permission roster
# ---------------------------------------------------------------------
def test_grant_is_idempotent_and_emits_once(registry):
    assert permissions.grant_permission(P1, P1, D1) == [D1]
    assert permissions.grant_permission(P1, P1, D1) == [D1]
    assert Patient.objects.get(wallet=P1).authorized_doctors == [D1]
    assert kinds().count(AuditEvent.KIND_PERMISSION_GRANTED) == 1


def test_revoke_preserves_order_of_remaining(registry):
    for d in (D1, D2, D3):
        permissions.grant_permission(P1, P1, d)
    assert permissions.revoke_permission(P1, P1, D2) == [D1, D3]
    assert permissions.get_patient_permissions(P1, P1) == [D1, D3]
    with pytest.raises(Unauthorized):
        permissions.get_patient_permissions(D2, P1)
    # not granted: nothing changes, no event
    before = AuditEvent.objects.count()
    assert permissions.revoke_permission(P1, P1, D2) == [D1, D3]
    assert AuditEvent.objects.count() == before


def test_only_patient_or_administrator_changes_grants(registry):
    for caller in (D1, P2, STRANGER, ''):
        with pytest.raises(Unauthorized):
            permissions.grant_permission(caller, P1, D1)
        with pytest.raises(Unauthorized):
            permissions.revoke_permission(caller, P1, D1)
    assert Patient.objects.get(wallet=P1).authorized_doctors == []

    assert permissions.grant_permission(ADMIN, P1, D1) == [D1]
    event = AuditEvent.objects.filter(kind=AuditEvent.KIND_PERMISSION_GRANTED).get()
    assert event.actor == ADMIN and event.subject == P1 and event.payload['doctor'] == D1
    assert permissions.revoke_permission(ADMIN, P1, D1) == []


def test_grant_requires_registered_parties(registry):
    with pytest.raises(NotFound):
        permissions.grant_permission(P1, P1, STRANGER)
    with pytest.raises(NotFound):
        permissions.grant_permission(ADMIN, STRANGER, D1)
    assert Patient.objects.get(wallet=P1).authorized_doctors == []


def test_grants_are_per_patient(registry):
    permissions.grant_permission(P1, P1, D1)
    assert identities.get_patient_info(D1, P1).wallet == P1
    with pytest.raises(Unauthorized):
        identities.get_patient_info(D1, P2)


# ---------------------------------------------------------------------
# Report ledger
# ---------------------------------------------------------------------
def test_write_report_appends_report_and_history(registry):
    report = reports.write_report(D2, P1, 7, '2024-02-02', 'QmA')
    reports.write_report(D2, P1, 7, '2024-02-03', 'QmB')
    assert report.doctor_id == D2 and report.report_number == 7
    assert identities.get_doctor_reports_history(D2) == ['QmA', 'QmB']
    assert [r.content_hash for r in reports.get_medical_reports(P1, P1)] == ['QmA', 'QmB']
    event = AuditEvent.objects.filter(kind=AuditEvent.KIND_REPORT_ADDED).first()
    assert event.payload == {'patient': P1, 'doctor': D2, 'reportNumber': 7, 'date': '2024-02-02', 'contentHash': 'QmA'}


def test_write_report_requires_registered_doctor(registry):
    for caller in (P1, STRANGER, ADMIN):
        with pytest.raises(Unauthorized):
            reports.write_report(caller, P1, 1, '2024-01-01', 'Qm')
    with pytest.raises(NotFound):
        reports.write_report(D1, STRANGER, 1, '2024-01-01', 'Qm')
    assert MedicalReport.objects.count() == 0
    assert Doctor.objects.get(wallet=D1).report_history == []


def test_write_report_is_atomic(registry, monkeypatch):
    events_before = AuditEvent.objects.count()

    def boom(doctor, content_hash):
        raise RuntimeError('disk full')

    monkeypatch.setattr(reports, '_append_report_history', boom)
    with pytest.raises(RuntimeError):
        reports.write_report(D1, P1, 1, '2024-01-01', 'Qm123')
    assert MedicalReport.objects.count() == 0
    assert Doctor.objects.get(wallet=D1).report_history == []
    assert AuditEvent.objects.count() == events_before


def test_reads_reject_third_parties(registry):
    permissions.grant_permission(P1, P1, D1)
    reads = (
        reports.get_medical_reports,
        identities.get_patient_info,
        identities.get_patient_test_results,
        permissions.get_patient_permissions,
    )
    for read in reads:
        read(P1, P1)
        read(D1, P1)
        for caller in (D2, P2, STRANGER, ADMIN, ''):
            with pytest.raises(Unauthorized):
                read(caller, P1)


def test_self_read_of_unregistered_patient_is_not_found(db):
    with pytest.raises(NotFound):
        identities.get_patient_info(STRANGER, STRANGER)


# ---------------------------------------------------------------------
# End-to-end scenario
# ---------------------------------------------------------------------
def test_grant_write_revoke_scenario(db):
    identities.register_doctor(ADMIN, D1, DOCTOR_INFO)
    identities.register_patient(ADMIN, P1, PATIENT_INFO)
    permissions.grant_permission(P1, P1, D1)
    reports.write_report(D1, P1, 1, '2024-01-01', 'Qm123')

    items = reports.get_medical_reports(P1, P1)
    assert len(items) == 1
    assert (items[0].doctor_id, items[0].report_number, items[0].content_hash) == (D1, 1, 'Qm123')
    assert identities.get_doctor_reports_history(D1) == ['Qm123']

    permissions.revoke_permission(P1, P1, D1)
    assert Patient.objects.get(wallet=P1).authorized_doctors == []
    assert D1 not in permissions.load_roster(Patient.objects.get(wallet=P1))
    with pytest.raises(Unauthorized):
        identities.get_patient_info(D1, P1)
    assert identities.get_doctor_reports_history(D1) == ['Qm123']

    assert kinds() == [
        AuditEvent.KIND_DOCTOR_REGISTERED,
        AuditEvent.KIND_PATIENT_REGISTERED,
        AuditEvent.KIND_PERMISSION_GRANTED,
        AuditEvent.KIND_REPORT_ADDED,
        AuditEvent.KIND_PERMISSION_REVOKED,
    ]
    assert list(AuditEvent.objects.values_list('sequence', flat=True)) == [1, 2, 3, 4, 5]
