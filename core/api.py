from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core import exceptions as errors

STATUS_BY_ERROR = (
    (errors.AccessError, status.HTTP_403_FORBIDDEN),
    (errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (errors.ConflictError, status.HTTP_409_CONFLICT),
    (errors.InsufficientBalanceError, status.HTTP_400_BAD_REQUEST),
    (errors.ExpiredError, status.HTTP_410_GONE),
    (errors.ValidationError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: errors.DomainError) -> int:
    for klass, code in STATUS_BY_ERROR:
        if isinstance(exc, klass):
            return code
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc, context):
    if isinstance(exc, errors.DomainError):
        return Response({"success": False, **exc.as_dict()}, status=status_for(exc))
    return exception_handler(exc, context)
