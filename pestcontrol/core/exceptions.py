"""Domain errors and the project-wide API exception handler"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('pestcontrol.api')

GENERIC_ERROR_MESSAGE = 'Something went wrong. Please try again.'


class OperationError(Exception):
    """A business rule rejected the operation; nothing was changed"""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class DuplicateBillNumber(OperationError):
    pass


class InsufficientStock(OperationError):
    pass


class InvalidAssignment(OperationError):
    pass


class LeadAlreadyConverted(OperationError):
    pass


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Known errors keep DRF's handling; OperationError becomes a 400 with the
    message, anything else is logged and answered with a generic 500.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, OperationError):
        logger.warning(f"Operation rejected: {exc.message}")
        return Response({'error': exc.message}, status=status.HTTP_400_BAD_REQUEST)

    view = context.get('view')
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
    return Response({'error': GENERIC_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
