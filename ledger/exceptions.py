from rest_framework import exceptions, status
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response


class LedgerError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'ledger operation failed'
    default_code = 'ledger_error'


class Unauthorized(exceptions.PermissionDenied):
    """A guard predicate did not hold for the caller."""
    default_detail = 'caller is not allowed to perform this operation'
    default_code = 'unauthorized'


class NotFound(exceptions.NotFound):
    """No record is registered for the identity."""
    default_detail = 'identity is not registered'
    default_code = 'not_found'


class InvariantViolation(LedgerError):
    """Internal consistency check failed; the mutation is rolled back."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'ledger invariant violated'
    default_code = 'invariant_violation'


LEDGER_ERRORS = (LedgerError, Unauthorized, NotFound)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    code = exc.default_code if isinstance(exc, LEDGER_ERRORS) else 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
