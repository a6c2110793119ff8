"""
Grant and revoke endpoints.

A patient omits ``patient`` (or passes its own wallet); the
administrator passes the patient it acts for.  Both endpoints answer
with the patient's authorized doctors after the change.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.permissions import HasWallet, caller_of
from ledger.serializers.identities import PermissionChangeSerializer
from ledger.services import permissions


def _parse(request):
    s = PermissionChangeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    caller = caller_of(request)
    return caller, s.validated_data.get('patient') or caller, s.validated_data['doctor']


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasWallet])
def grant(request):
    caller, patient, doctor = _parse(request)
    return Response({'ok': True, 'data': permissions.grant_permission(caller, patient, doctor)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, HasWallet])
def revoke(request):
    caller, patient, doctor = _parse(request)
    return Response({'ok': True, 'data': permissions.revoke_permission(caller, patient, doctor)})
