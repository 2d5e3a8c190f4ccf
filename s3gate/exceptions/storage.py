"""Storage endpoint exceptions."""

from fastapi import status

from s3gate.exceptions.base.fastapi import FastAPIBadRequestException, FastAPIInternalServerErrorException
from s3gate.files.s3.pydantic import S3FailedOutcome, S3FailureKind
from s3gate.utils.strings import to_constant_case


class MalformedInputException(FastAPIBadRequestException):
    """A request field is missing or invalid."""

    detail = "Malformed input"


class MissingFieldException(MalformedInputException):
    """A required request field is missing."""

    detail = "No {field} provided"


class InvalidActionException(MalformedInputException):
    """The action is missing or unknown."""

    detail = "Invalid action. Use: list, get, upload, or delete"


class StorageOperationFailedException(FastAPIInternalServerErrorException):
    """A storage operation failed at the provider or on the way to it."""

    detail = "Storage operation failed"

    @classmethod
    def from_failure(cls, failure: S3FailedOutcome) -> "StorageOperationFailedException":
        """Build the exception from a failed outcome; the error code is the failure kind.

        Malformed input is the caller's fault and is answered with 400.
        """
        return cls(
            detail=failure.detail,
            status_code=status.HTTP_400_BAD_REQUEST if failure.kind is S3FailureKind.MALFORMED_INPUT else None,
            error_code=to_constant_case(failure.kind.value),
            additional_info={"kind": failure.kind.value},
        )
