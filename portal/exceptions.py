"""
Error taxonomy for the portal API.

Every error leaves the API as ``{"kind": <stable code>, "error": <message>}``.
Services raise the exceptions defined here; DRF's own validation,
authentication and permission errors are mapped onto the same kinds by
``exception_handler``.
"""

import logging

from django.conf import settings
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework_simplejwt.exceptions import InvalidToken

logger = logging.getLogger(__name__)


class PortalError(exceptions.APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred'
    default_code = 'internal'


class BadRequest(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request'
    default_code = 'bad_request'


class Unauthenticated(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Access denied. Token required.'
    default_code = 'unauthenticated'


class Unauthorized(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials.'
    default_code = 'unauthorized'


class InvalidCredential(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid or expired token'
    default_code = 'invalid_credential'


class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Access denied'
    default_code = 'forbidden'


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class Conflict(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Already exists'
    default_code = 'conflict'


# DRF exceptions that are not PortalError subclasses
_DRF_KINDS = [
    (InvalidToken, InvalidCredential.default_code),
    (exceptions.NotAuthenticated, Unauthenticated.default_code),
    (exceptions.AuthenticationFailed, InvalidCredential.default_code),
    (exceptions.PermissionDenied, Forbidden.default_code),
    (exceptions.NotFound, NotFound.default_code),
    (exceptions.ValidationError, BadRequest.default_code),
    (exceptions.ParseError, BadRequest.default_code),
]


def _kind_for(exc):
    if isinstance(exc, PortalError):
        return exc.default_code
    for exc_class, kind in _DRF_KINDS:
        if isinstance(exc, exc_class):
            return kind
    return getattr(exc, 'default_code', 'error')


def _message_for(exc):
    detail = exc.detail
    if isinstance(exc, InvalidToken):
        return InvalidCredential.default_detail
    if isinstance(detail, dict):
        # simplejwt and DRF wrap messages in {'detail': ...}
        if 'detail' in detail and len(detail) == 1:
            return str(detail['detail'])
        return detail
    if isinstance(detail, list):
        return ' '.join(str(item) for item in detail)
    return str(detail)


def exception_handler(exc, context):
    if isinstance(exc, Http404):
        exc = NotFound()

    response = drf_exception_handler(exc, context)
    if response is not None:
        response.data = {'kind': _kind_for(exc), 'error': _message_for(exc)}
        return response

    view = context.get('view')
    logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'request')
    data = {'kind': 'internal', 'error': 'An unexpected error occurred'}
    if settings.DEBUG:
        data['message'] = str(exc)
    return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
