from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


class AulaoError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be completed.'

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def extra(self):
        return {}


class NotFoundError(AulaoError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'


class ValidationError(AulaoError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid data.'


class PermissionDeniedError(AulaoError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Administrator access required.'


class StorageError(AulaoError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Storage operation failed.'


class SessionCleanupError(StorageError):
    """A step of the ordered class deletion failed.

    Steps listed in ``completed_steps`` already ran and are not undone;
    running the deletion again resumes from a consistent point because
    every step is idempotent.
    """

    def __init__(self, step, completed_steps, detail=None):
        self.step = step
        self.completed_steps = list(completed_steps)
        super().__init__(detail or f"Class deletion failed at step '{step}'.")

    def extra(self):
        return {'failed_step': self.step, 'completed_steps': self.completed_steps}


class UploadError(AulaoError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'File upload failed.'


class PartialFailure(AulaoError):
    status_code = status.HTTP_207_MULTI_STATUS

    def __init__(self, success_count, error_count, detail=None):
        self.success_count = success_count
        self.error_count = error_count
        super().__init__(
            detail or f"Emails sent to {success_count} participants, {error_count} failed."
        )

    def extra(self):
        return {'success_count': self.success_count, 'error_count': self.error_count}


def custom_exception_handler(exc, context):
    if isinstance(exc, (InvalidToken, TokenError, AuthenticationFailed)):
        return Response(
            {"detail": "Invalid token."},
            status=401
        )
    if isinstance(exc, AulaoError):
        return Response(
            {"detail": exc.detail, **exc.extra()},
            status=exc.status_code
        )
    return exception_handler(exc, context)
