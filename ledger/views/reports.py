from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.permissions import IsRegisteredDoctor, caller_of
from ledger.serializers.reports import ReportWriteSerializer
from ledger.services import reports


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsRegisteredDoctor])
def write_report(request):
    """Append a report reference for a patient.

    Body: ``patient``, ``reportNumber``, ``date``, ``contentHash``.
    """
    s = ReportWriteSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    report = reports.write_report(
        caller_of(request),
        vd['patient'],
        vd['report_number'],
        vd['date'],
        vd['content_hash'],
    )
    return Response({'ok': True, 'data': reports.format_report(report)}, status=201)
