"""Storage endpoint request and response schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from s3gate.files.s3.naming import validate_object_key
from s3gate.files.s3.pydantic import S3ObjectDescriptor

DEFAULT_UPLOAD_CONTENT_TYPE = "application/octet-stream"


class StorageSchema(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class StorageListRequest(StorageSchema):
    """`list` action input."""

    prefix: str = ""
    limit: int | None = Field(default=None, ge=1)
    continuation_token: str | None = None


class StorageFileRequest(StorageSchema):
    """`get` and `delete` action input."""

    file_name: str = Field(min_length=1)

    @field_validator("file_name")
    @classmethod
    def check_file_name(cls, value: str) -> str:
        """Reject keys that would not address exactly one object."""
        return validate_object_key(value)


class StorageUploadRequest(StorageSchema):
    """`upload` action input for JSON bodies; `file_data` is base64."""

    file_data: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    content_type: str | None = None
    folder: str | None = None
    preserve_name: bool = False


class StorageMultipartUploadFields(StorageSchema):
    """Non-file fields of a multipart `upload`."""

    file_name: str | None = None
    folder: str | None = None
    preserve_name: bool = False


class StorageFileSchema(StorageSchema):
    """One listed file."""

    name: str
    size: int
    last_modified: str
    url: str

    @classmethod
    def from_descriptor(cls, descriptor: S3ObjectDescriptor) -> "StorageFileSchema":
        """Build the schema from an object descriptor."""
        return cls(
            name=descriptor.key,
            size=descriptor.size,
            last_modified=descriptor.last_modified,
            url=descriptor.public_url,
        )


class StorageListResponse(StorageSchema):
    """`list` action result."""

    success: bool = True
    files: list[StorageFileSchema]
    is_truncated: bool = False
    next_continuation_token: str | None = None


class StorageGetResponse(StorageSchema):
    """`get` action result."""

    success: bool = True
    file_data: str
    content_type: str


class StorageUploadResponse(StorageSchema):
    """`upload` action result."""

    success: bool = True
    url: str
    file_name: str


class StorageDeleteResponse(StorageSchema):
    """`delete` action result."""

    success: bool = True
