from django.db import connections, DatabaseError
from django.http import JsonResponse

from ledger.models import LedgerHead


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        head = LedgerHead.objects.filter(pk=1).values_list('sequence', flat=True).first()
        return JsonResponse({'ok': True, 'db': bool(row and row[0]==1), 'sequence': head or 0})
    except DatabaseError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
