"""
Patient endpoints.

Registration is reserved to the administrator.  Every read below is
open to the patient itself and to doctors the patient has currently
granted; anyone else receives 403 whether or not the patient exists.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.permissions import HasWallet, IsLedgerAdministrator, IsRegisteredPatient, caller_of
from ledger.serializers.identities import PatientRegisterSerializer, TestResultSerializer
from ledger.services import identities, permissions, reports


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsLedgerAdministrator])
def register_patient(request):
    s = PatientRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    wallet = data.pop('wallet')
    patient = identities.register_patient(caller_of(request), wallet, data)
    return Response({'ok': True, 'data': identities.format_patient(patient)}, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRegisteredPatient])
def my_record(request):
    """Shortcut for a patient reading its own record."""
    caller = caller_of(request)
    patient = identities.get_patient_info(caller, caller)
    payload = identities.format_patient(patient)
    payload['authorizedDoctors'] = permissions.get_patient_permissions(caller, caller)
    return Response({'ok': True, 'data': payload})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasWallet])
def patient_info(request, wallet: str):
    patient = identities.get_patient_info(caller_of(request), wallet)
    return Response({'ok': True, 'data': identities.format_patient(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasWallet])
def patient_permissions(request, wallet: str):
    return Response({'ok': True, 'data': permissions.get_patient_permissions(caller_of(request), wallet)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, HasWallet])
def patient_reports(request, wallet: str):
    items = reports.get_medical_reports(caller_of(request), wallet)
    return Response({'ok': True, 'data': [reports.format_report(r) for r in items]})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, HasWallet])
def patient_test_results(request, wallet: str):
    caller = caller_of(request)
    if request.method == 'POST':
        s = TestResultSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = identities.record_test_result(caller, wallet, s.validated_data['reference'])
        return Response({'ok': True, 'data': data}, status=201)
    return Response({'ok': True, 'data': identities.get_patient_test_results(caller, wallet)})
