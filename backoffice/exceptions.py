import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class Conflict(exceptions.APIException):
    status_code = 409
    default_detail = 'Data masih digunakan oleh data lain.'
    default_code = 'conflict'


_CODES = (
    (exceptions.ValidationError, 'validation_error'),
    (exceptions.NotAuthenticated, 'not_authenticated'),
    (exceptions.AuthenticationFailed, 'not_authenticated'),
    (exceptions.PermissionDenied, 'permission_denied'),
    (exceptions.NotFound, 'not_found'),
    (exceptions.Throttled, 'throttled'),
    (Conflict, 'conflict'),
)


def _code_for(exc) -> str:
    for cls, code in _CODES:
        if isinstance(exc, cls):
            return code
    return 'api_error'


def api_exception_handler(exc, context):
    if isinstance(exc, ProtectedError):
        exc = Conflict()
    elif isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = exceptions.PermissionDenied()
    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('Unhandled error in %s', getattr(view, '__name__', view.__class__.__name__ if view else '?'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    elif isinstance(resp.data, list):
        detail = resp.data[0] if len(resp.data) == 1 else resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': _code_for(exc), 'message': detail}}, status=resp.status_code, headers=_passthrough_headers(resp))


def _passthrough_headers(resp) -> dict:
    return {k: resp[k] for k in ('WWW-Authenticate', 'Retry-After') if k in resp}
