"""
Django admin registrations for the ledger models.

Operators use ``/admin/`` to inspect the ledger.  Ledger records are
exposed read-only: changes must go through the service operations so
guards run and audit events are written.
"""

from django.contrib import admin

from .models import User, Doctor, Patient, MedicalReport, AuditEvent, LedgerHead


class ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'wallet', 'is_staff', 'is_superuser')
    search_fields = ('username', 'wallet', 'first_name', 'last_name')


@admin.register(Doctor)
class DoctorAdmin(ReadOnlyAdmin):
    list_display = ('wallet', 'name', 'specialty', 'emergency_available', 'registered_at')
    list_filter = ('specialty', 'emergency_available')
    search_fields = ('wallet', 'name', 'specialty')


@admin.register(Patient)
class PatientAdmin(ReadOnlyAdmin):
    list_display = ('wallet', 'registered_at', 'updated_at')
    search_fields = ('wallet',)


@admin.register(MedicalReport)
class MedicalReportAdmin(ReadOnlyAdmin):
    list_display = ('id', 'patient', 'doctor', 'report_number', 'date', 'content_hash')
    search_fields = ('patient__wallet', 'doctor__wallet', 'content_hash')


@admin.register(AuditEvent)
class AuditEventAdmin(ReadOnlyAdmin):
    list_display = ('sequence', 'kind', 'actor', 'subject', 'created_at')
    list_filter = ('kind',)
    search_fields = ('actor', 'subject')


@admin.register(LedgerHead)
class LedgerHeadAdmin(ReadOnlyAdmin):
    list_display = ('id', 'sequence', 'updated_at')
