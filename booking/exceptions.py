# booking/exceptions.py
"""
Error taxonomy and the REST framework exception handler for the School Lab Booking.

This file is part of the School Lab Booking.
Copyright (C) 2025 School Lab Booking Contributors

This software is licensed under the GNU General Public License v3.0 (GPL-3.0).
For license terms, see LICENSE file.
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BookingAppError(exceptions.APIException):
    """Base class for errors raised by the booking app."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = 'INTERNAL_ERROR'
    default_detail = 'An unexpected error occurred.'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_detail)
        self.message = str(self.detail)
        self.details = details or {}


class ValidationError(BookingAppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = 'VALIDATION_ERROR'
    default_detail = 'Invalid input.'


class AuthorizationError(BookingAppError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = 'AUTHORIZATION_ERROR'
    default_detail = 'You do not have permission to perform this action.'


class NotFoundError(BookingAppError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = 'NOT_FOUND'
    default_detail = 'Not found.'

    def __init__(self, resource, identifier=None):
        if identifier is not None:
            message = f"{resource} with id '{identifier}' not found"
            details = {'resource': resource, 'identifier': str(identifier)}
        else:
            message = f"{resource} not found"
            details = {'resource': resource}
        super().__init__(message, details)


class ConflictError(BookingAppError):
    status_code = status.HTTP_409_CONFLICT
    error_code = 'CONFLICT'
    default_detail = 'The request conflicts with existing data.'


class InternalError(BookingAppError):
    pass


# REST framework exceptions that do not carry their own error code
DRF_ERROR_CODES = {
    exceptions.ValidationError: 'VALIDATION_ERROR',
    exceptions.ParseError: 'VALIDATION_ERROR',
    exceptions.AuthenticationFailed: 'AUTHENTICATION_ERROR',
    exceptions.NotAuthenticated: 'AUTHORIZATION_ERROR',
    exceptions.PermissionDenied: 'AUTHORIZATION_ERROR',
    exceptions.NotFound: 'NOT_FOUND',
    exceptions.MethodNotAllowed: 'METHOD_NOT_ALLOWED',
    exceptions.UnsupportedMediaType: 'UNSUPPORTED_MEDIA_TYPE',
}


def _error_response(error_code, message, details, status_code, headers=None):
    return Response(
        {'error': error_code, 'message': message, 'details': details},
        status=status_code,
        headers=headers,
    )


def _translate(exc):
    """Map framework and database exceptions onto the booking error taxonomy."""
    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else {'errors': exc.messages}
        return ValidationError('Invalid input.', details)
    if isinstance(exc, ProtectedError):
        referenced_by = sorted({obj._meta.verbose_name_plural for obj in exc.protected_objects})
        return ConflictError(
            'Cannot delete this record because it is still referenced.',
            {'referenced_by': [str(name) for name in referenced_by]},
        )
    if isinstance(exc, IntegrityError):
        return ConflictError('Database integrity constraint violated.', {'constraint': str(exc)})
    if isinstance(exc, Http404):
        return NotFoundError('Resource')
    return exc


def api_exception_handler(exc, context):
    """
    Render every API error as ``{"error", "message", "details"}``.

    Unexpected exceptions are logged with a traceback and answered with a
    generic 500 so no internals leak to the client.
    """
    exc = _translate(exc)
    request = context.get('request')
    path = request.path if request is not None else ''

    if isinstance(exc, BookingAppError):
        log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(log_level, f"{exc.error_code} on {path}: {exc.message}")
        return _error_response(exc.error_code, exc.message, exc.details, exc.status_code)

    if isinstance(exc, exceptions.NotAuthenticated):
        logger.info(f"Unauthenticated request to {path}")
        return _error_response(
            'AUTHORIZATION_ERROR', str(exc.detail), {}, status.HTTP_403_FORBIDDEN
        )

    response = exception_handler(exc, context)
    if response is not None:
        error_code = next(
            (code for exc_class, code in DRF_ERROR_CODES.items() if isinstance(exc, exc_class)),
            'HTTP_ERROR',
        )
        if isinstance(exc.detail, (list, dict)):
            message = 'Invalid input.' if error_code == 'VALIDATION_ERROR' else str(exc)
            details = exc.detail if isinstance(exc.detail, dict) else {'errors': exc.detail}
        else:
            message = str(exc.detail)
            details = {}
        response.data = {'error': error_code, 'message': message, 'details': details}
        return response

    logger.exception(f"Unhandled exception on {path}: {type(exc).__name__}")
    return _error_response(
        InternalError.error_code, InternalError.default_detail, {},
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
