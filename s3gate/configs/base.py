"""Base config."""

from typing import Self

from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings


class StorageConfigurationError(Exception):
    """Raised at startup when required settings are missing or invalid.

    The message names the offending settings only; values (secrets included)
    are never part of it.
    """


class BaseConfig(BaseModel):
    """Application config assembled from `BaseSettings` sections.

    Every field annotated with a `BaseSettings` subclass is read from the
    environment by `from_env`.
    """

    @classmethod
    def from_env(cls) -> Self:
        """Build the config from the environment.

        Raises:
            StorageConfigurationError: If any section fails validation.

        """
        sections: dict[str, BaseSettings] = {}
        problems: list[str] = []
        for name, field in cls.model_fields.items():
            annotation = field.annotation
            if not (isinstance(annotation, type) and issubclass(annotation, BaseSettings)):
                continue
            try:
                sections[name] = annotation()
            except ValidationError as exc:
                problems.extend(
                    f"{name}.{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                    for error in exc.errors(include_input=False, include_url=False)
                )

        if problems:
            raise StorageConfigurationError("Invalid configuration: " + "; ".join(problems))

        return cls(**sections)
