"""
URL mappings for the ledger API.

Trailing slashes are omitted to match the front-end
client.  Wallet path segments are matched as plain strings.
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import doctors, health, patients, permissions, reports


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view),
    path('api/auth/logout', jwt_logout_view),
    # Identity registry
    path('api/doctors/register', doctors.register_doctor),
    path('api/doctors', doctors.list_doctors),
    path('api/doctors/<str:wallet>', doctors.doctor_info),
    path('api/doctor/reports-history', doctors.reports_history),
    path('api/doctor/active-patients', doctors.active_patients),
    path('api/doctor/active-patients/assign', doctors.assign_active_patient),
    path('api/patients/register', patients.register_patient),
    path('api/patient/me', patients.my_record),
    path('api/patients/<str:wallet>', patients.patient_info),
    path('api/patients/<str:wallet>/permissions', patients.patient_permissions),
    path('api/patients/<str:wallet>/reports', patients.patient_reports),
    path('api/patients/<str:wallet>/test-results', patients.patient_test_results),
    # Permission roster
    path('api/permissions/grant', permissions.grant),
    path('api/permissions/revoke', permissions.revoke),
    # Report ledger
    path('api/reports/write', reports.write_report),
]
