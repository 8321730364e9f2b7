"""
Domain errors for the activity hub and the DRF exception handler that turns
them into client-facing responses.

The program catalog, access policy and review workflow raise these plain
exceptions; only the handler below knows about HTTP.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base class for rule violations raised by the core modules"""
    code = 'domain_error'
    default_message = 'Request could not be processed'

    def __init__(self, message=None, **context):
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)


class InvalidProgramSelection(DomainError):
    """Program or specialization not found within the resolved category/program"""
    code = 'invalid_program_selection'
    default_message = 'Invalid program selection'


class UnresolvedCategory(InvalidProgramSelection):
    """Category string matches neither a key nor a display value"""
    code = 'unresolved_category'
    default_message = 'Unknown program category'


class MissingMandatoryField(DomainError):
    """A role-mandatory profile field is absent"""
    code = 'missing_mandatory_field'
    default_message = 'A mandatory field is missing'

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f'{field} is required', field=field)


class CreditsNotAllowed(DomainError):
    code = 'credits_not_allowed'
    default_message = 'Credits can only be awarded when approving an activity'


class OutOfScope(DomainError):
    """Acting user's access scope excludes the target record"""
    code = 'out_of_scope'
    default_message = 'You are not allowed to act on this record'


class AlreadyReviewed(DomainError):
    code = 'already_reviewed'
    default_message = 'Activity has already been reviewed'


STATUS_BY_ERROR = (
    (InvalidProgramSelection, status.HTTP_400_BAD_REQUEST),
    (MissingMandatoryField, status.HTTP_400_BAD_REQUEST),
    (CreditsNotAllowed, status.HTTP_400_BAD_REQUEST),
    (OutOfScope, status.HTTP_403_FORBIDDEN),
    (AlreadyReviewed, status.HTTP_409_CONFLICT),
)


def status_for(exc):
    for error_class, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc, context):
    """
    REST framework exception handler.

    Maps DomainError subclasses to 400/403/409 responses and defers
    everything else to the framework's default handler.
    """
    if isinstance(exc, DomainError):
        view = context.get('view')
        logger.warning(
            f"{exc.__class__.__name__} in {view.__class__.__name__ if view else 'unknown view'}: {exc.message}"
        )
        payload = {
            'success': False,
            'message': exc.message,
            'code': exc.code,
        }
        if exc.context:
            payload['details'] = exc.context
        return Response(payload, status=status_for(exc))

    return exception_handler(exc, context)
