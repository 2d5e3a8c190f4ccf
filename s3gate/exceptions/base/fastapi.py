"""Base classes for HTTP exceptions."""

import string
from logging import getLogger
from typing import Any

from fastapi import HTTPException, status

from s3gate.utils.strings import to_constant_case

logger = getLogger(__name__)


class FastAPIBaseException(HTTPException):
    """FastAPI base exception.

    All custom http exceptions must inherit from this class.

    Example:
    ```
        class MyException(FastAPIBaseException):
            status_code = status.HTTP_400_BAD_REQUEST
            detail = "No {field} provided"

        raise MyException(field="fileName")
    ```

    """

    detail: str = "Internal server error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None
    additional_info: dict[str, Any] = {}

    def __init__(
        self,
        detail: str | None = None,
        status_code: int | None = None,
        *,
        headers: dict[str, str] | None = None,
        error_code: str | None = None,
        additional_info: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """Exception init method.

        Args:
            detail (str): Exception detail.
            status_code (int): HTTP status code.
            headers (dict): Headers to be added to the response.
            error_code (str): Error code to be added to the response.
            additional_info (dict): Additional info to be added to the response.
            **kwargs (Any): Values for the format specifiers of the detail.

        """
        self.current_detail = detail or self.detail
        self.current_headers = (self.headers or {}) | (headers or {})
        self.current_status_code = status_code or self.status_code
        self.current_additional_info = (self.additional_info or {}).copy() | (additional_info or {})
        self.current_error_code = error_code or self.get_class_error_code()
        # Only the class-level template is formatted; a passed detail is final text.
        if detail is None:
            self._format_detail_from_kwargs(kwargs)
        super().__init__(
            status_code=self.current_status_code,
            detail=self.current_detail,
            headers=self.current_headers,
        )
        self.additional_info = self.current_additional_info

    @classmethod
    def get_class_error_code(cls) -> str:
        """Get error code. It's a constant case of the class name."""
        return to_constant_case(cls.__name__.replace("FastAPI", ""))

    @property
    def error_code(self) -> str:
        """Error code."""
        return self.current_error_code

    def _format_detail_from_kwargs(self, kwargs: dict[str, Any]) -> None:
        """Format exception detail message using kwargs if applicable."""
        arguments_to_format = [tup[1] for tup in string.Formatter().parse(self.current_detail) if tup[1]]

        if not arguments_to_format:
            return

        if not all(arg in kwargs for arg in arguments_to_format):
            message = (
                f"Detail '{self.current_detail}' contains format specifiers "
                "that are not passed to the exception constructor as arguments"
            )
            raise ValueError(message)

        self.current_detail = self.current_detail.format_map(kwargs)

    def __repr__(self) -> str:
        """Str repr."""
        detail = self.current_detail or "no detail"
        return f"<{self.__class__.__name__} (code: {self.current_status_code})> {detail}"

    def __str__(self) -> str:
        """Str repr."""
        return self.__repr__()


class FastAPIBadRequestException(FastAPIBaseException):
    """400 Bad Request."""

    status_code = status.HTTP_400_BAD_REQUEST


class FastAPIInternalServerErrorException(FastAPIBaseException):
    """500 Internal Server Error."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
