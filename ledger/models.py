"""
Database models for the medical record access ledger.

The ledger tracks who may read and extend medical-record references.
Identities are wallet addresses; medical content itself lives off-chain
and is referenced only by an opaque content hash.  Ordered lists
(active patients, report history, test results, authorized doctors) are
stored as JSON arrays so that their order is exactly the append order.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models

WALLET_MAX_LENGTH = 64


class User(AbstractUser):
    """Login account bound to a ledger wallet.

    The wallet is the caller identity passed to every ledger operation.
    Accounts without a wallet can authenticate but cannot act on the
    ledger.
    """
    wallet = models.CharField(max_length=WALLET_MAX_LENGTH, unique=True, null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.wallet or '-'})"


class LedgerHead(models.Model):
    """Singleton row locked by every mutation to serialise writers.

    ``sequence`` is the number of the last audit event committed.
    """
    id = models.PositiveSmallIntegerField(primary_key=True, default=1)
    sequence = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"ledger@{self.sequence}"


class Doctor(models.Model):
    """A registered doctor and its professional information."""
    wallet = models.CharField(max_length=WALLET_MAX_LENGTH, primary_key=True)
    name = models.CharField(max_length=255)
    contact = models.CharField(max_length=255, blank=True)
    experience_years = models.PositiveIntegerField(default=0)
    specialty = models.CharField(max_length=255, blank=True, db_index=True)
    emergency_available = models.BooleanField(default=False)
    available_time = models.CharField(max_length=255, blank=True)
    # wallets of patients this doctor is actively treating, in assignment order
    active_patients = models.JSONField(default=list, blank=True)
    # content hashes of every report this doctor wrote, in write order
    report_history = models.JSONField(default=list, blank=True)
    registered_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['registered_at', 'wallet']

    def __str__(self) -> str:
        return f"Dr. {self.name} ({self.wallet})"


class Patient(models.Model):
    """A registered patient.

    ``authorized_doctors`` is the persisted form of the patient's
    :class:`ledger.roster.PermissionRoster`.  It is never written
    directly; go through :mod:`ledger.services.permissions`.
    Re-registering a patient does not touch it.
    """
    wallet = models.CharField(max_length=WALLET_MAX_LENGTH, primary_key=True)
    conditions = models.TextField(blank=True)
    medications = models.TextField(blank=True)
    allergies = models.TextField(blank=True)
    medical_history = models.JSONField(default=list, blank=True)
    test_results = models.JSONField(default=list, blank=True)
    authorized_doctors = models.JSONField(default=list, blank=True)
    registered_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"patient {self.wallet}"


class MedicalReport(models.Model):
    """Immutable reference to an off-chain report.

    ``report_number`` is supplied by the writing doctor and is not
    checked for uniqueness or ordering.
    """
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='reports')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='reports')
    report_number = models.PositiveBigIntegerField()
    date = models.CharField(max_length=64)
    content_hash = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['patient', 'id'], name='ledger_medi_patient_2c7e9a_idx'),
        ]

    def __str__(self) -> str:
        return f"report #{self.report_number} p={self.patient_id} d={self.doctor_id}"


class AuditEvent(models.Model):
    """One committed ledger mutation, for external indexing."""
    KIND_DOCTOR_REGISTERED = 'DoctorRegistered'
    KIND_PATIENT_REGISTERED = 'PatientRegistered'
    KIND_PERMISSION_GRANTED = 'PermissionGranted'
    KIND_PERMISSION_REVOKED = 'PermissionRevoked'
    KIND_REPORT_ADDED = 'MedicalReportAdded'
    KIND_ACTIVE_PATIENT_ASSIGNED = 'ActivePatientAssigned'
    KIND_TEST_RESULT_RECORDED = 'TestResultRecorded'
    KIND_CHOICES = (
        (KIND_DOCTOR_REGISTERED, KIND_DOCTOR_REGISTERED),
        (KIND_PATIENT_REGISTERED, KIND_PATIENT_REGISTERED),
        (KIND_PERMISSION_GRANTED, KIND_PERMISSION_GRANTED),
        (KIND_PERMISSION_REVOKED, KIND_PERMISSION_REVOKED),
        (KIND_REPORT_ADDED, KIND_REPORT_ADDED),
        (KIND_ACTIVE_PATIENT_ASSIGNED, KIND_ACTIVE_PATIENT_ASSIGNED),
        (KIND_TEST_RESULT_RECORDED, KIND_TEST_RESULT_RECORDED),
    )

    sequence = models.PositiveBigIntegerField(unique=True)
    kind = models.CharField(max_length=32, choices=KIND_CHOICES)
    actor = models.CharField(max_length=WALLET_MAX_LENGTH)
    subject = models.CharField(max_length=WALLET_MAX_LENGTH, blank=True)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['sequence']
        indexes = [
            models.Index(fields=['kind', 'created_at'], name='ledger_audi_kind_5a1c2e_idx'),
            models.Index(fields=['subject', 'sequence'], name='ledger_audi_subject_8f3b4d_idx'),
        ]

    def __str__(self) -> str:
        return f"#{self.sequence} {self.kind} by {self.actor}"
