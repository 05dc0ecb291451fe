"""
Core — Exception Handling

Custom exceptions raised by the service layer and the DRF exception
handler that renders them in a consistent API error envelope.

@file core/exceptions.py
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('stockflow')


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class BusinessRuleViolation(APIException):
    """Raised when a business rule is violated at the service layer."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Business rule violation.'
    default_code = 'BUSINESS_RULE_VIOLATION'


class InvalidInputError(BusinessRuleViolation):
    """Missing header field, bad quantity, or empty line set where one is required."""
    default_detail = 'Invalid input.'
    default_code = 'INVALID_INPUT'


class InvalidStateTransition(BusinessRuleViolation):
    """Raised when a state machine transition is not allowed."""
    default_detail = 'Invalid state transition.'
    default_code = 'INVALID_STATE_TRANSITION'


class InsufficientStockError(APIException):
    """
    Raised when an outbound quantity exceeds the available stock of a product.

    Carries the offending product, the maximum satisfiable quantity and the
    requested quantity so callers can display or retry.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock for this operation.'
    default_code = 'INSUFFICIENT_STOCK'

    def __init__(self, detail=None, code=None, *, product_id=None, available=None, requested=None):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        if product_id is not None:
            if detail is None:
                detail = (
                    f'Insufficient stock for product {product_id}: '
                    f'available={available}, requested={requested}.'
                )
            detail = {
                'detail': detail,
                'product_id': product_id,
                'available': available,
                'requested': requested,
            }
        super().__init__(detail=detail, code=code)


class AlreadyValidatedError(APIException):
    """Raised when a document in terminal `done` status is validated, edited or deleted."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Document has already been validated.'
    default_code = 'ALREADY_VALIDATED'


class StorageConflictError(APIException):
    """Raised when an atomic unit of work could not complete consistently; nothing was applied."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The operation conflicted with a concurrent change and was rolled back.'
    default_code = 'STORAGE_CONFLICT'


class DuplicateResourceError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists.'
    default_code = 'DUPLICATE_RESOURCE'


class ResourceNotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'RESOURCE_NOT_FOUND'


# ---------------------------------------------------------------------------
# Standard exception handler
# ---------------------------------------------------------------------------

def standard_exception_handler(exc, context):
    """
    Wraps every error response in the standard envelope:
      { "success": false, "errors": {...}, "code": "ERROR_CODE" }
    """
    if isinstance(exc, Http404):
        exc = ResourceNotFoundError()
    elif isinstance(exc, PermissionDenied):
        exc = APIException(detail='Permission denied.', code='PERMISSION_DENIED')
        exc.status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, ValidationError):
        data = {
            'success': False,
            'errors': exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages},
            'code': 'VALIDATION_ERROR',
        }
        return Response(data, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)

    if response is not None:
        errors = {}
        code = getattr(exc, 'default_code', 'ERROR')

        if isinstance(response.data, dict):
            errors = response.data
            code = response.data.pop('code', code) if 'code' in response.data else code
        elif isinstance(response.data, list):
            errors = {'detail': response.data}
        else:
            errors = {'detail': [str(response.data)]}

        response.data = {
            'success': False,
            'errors': errors,
            'code': code,
        }

    if response is None:
        logger.exception('Unhandled exception in view: %s', exc)
        return Response(
            {'success': False, 'errors': {'detail': ['Internal server error.']}, 'code': 'INTERNAL_ERROR'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return response
