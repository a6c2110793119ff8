"""
Doctor endpoints.

* ``POST /api/doctors/register`` - administrator registers (or
  re-registers) a doctor.
* ``GET /api/doctors`` - public doctor directory with optional ``q`` and
  ``emergencyOnly`` filters.
* ``GET /api/doctors/<wallet>`` - public profile of one doctor.
* ``GET /api/doctor/reports-history`` - the calling doctor's authored
  content hashes.
* ``GET /api/doctor/active-patients`` and
  ``POST /api/doctor/active-patients/assign`` - the calling doctor's
  active patient list.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ledger.permissions import HasWallet, IsLedgerAdministrator, IsRegisteredDoctor, caller_of
from ledger.serializers.identities import DoctorListQuerySerializer, DoctorRegisterSerializer, PatientAssignSerializer
from ledger.services import identities


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsLedgerAdministrator])
def register_doctor(request):
    s = DoctorRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    wallet = data.pop('wallet')
    doctor = identities.register_doctor(caller_of(request), wallet, data)
    return Response({'ok': True, 'data': identities.format_doctor(doctor)}, status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def list_doctors(request):
    q = DoctorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    doctors = identities.get_all_doctors(
        q=(q.validated_data.get('q') or '').strip() or None,
        emergency_only=q.validated_data.get('emergencyOnly', False),
    )
    return Response({'ok': True, 'data': [identities.format_doctor(d) for d in doctors]})


@api_view(['GET'])
@permission_classes([AllowAny])
def doctor_info(request, wallet: str):
    doctor = identities.get_doctor_info(wallet)
    return Response({'ok': True, 'data': identities.format_doctor(doctor)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRegisteredDoctor])
def reports_history(request):
    return Response({'ok': True, 'data': identities.get_doctor_reports_history(caller_of(request))})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRegisteredDoctor])
def active_patients(request):
    return Response({'ok': True, 'data': identities.get_active_patients(caller_of(request))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasWallet])
def assign_active_patient(request):
    s = PatientAssignSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = identities.assign_active_patient(caller_of(request), s.validated_data['patient'])
    return Response({'ok': True, 'data': data})
