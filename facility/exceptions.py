import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class DomainError(APIException):
    """Base for business errors; ``extra`` is merged into the error payload."""

    def __init__(self, detail=None, code=None, **extra):
        super().__init__(detail, code)
        self.extra = extra


class BusinessRuleViolation(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'business rule violated'
    default_code = 'business_rule'


class ReferenceInUse(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'record is still referenced'
    default_code = 'reference_in_use'


class DuplicateName(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'name must be unique'
    default_code = 'duplicate'


def api_exception_handler(exc, context):
    if isinstance(exc, ProtectedError):
        exc = ReferenceInUse('record is still referenced by other data')
    elif isinstance(exc, IntegrityError):
        exc = DuplicateName(str(exc))

    resp = drf_exception_handler(exc, context)
    if resp is None:
        view = context.get('view')
        logger.exception('unhandled error in %s', getattr(view, '__name__', view))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)

    # normalize response
    if isinstance(resp.data, dict):
        message = resp.data.get('detail') or resp.data
    elif isinstance(resp.data, list) and len(resp.data) == 1:
        message = resp.data[0]
    else:
        message = resp.data
    codes = exc.get_codes() if hasattr(exc, 'get_codes') else None
    error = {'code': codes if isinstance(codes, str) else getattr(exc, 'default_code', 'api_error'), 'message': message}
    error.update(getattr(exc, 'extra', {}))
    resp.data = {'ok': False, 'error': error}
    return resp
