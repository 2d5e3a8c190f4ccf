"""Error schema for API exceptions."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FastAPIErrorSchema(BaseModel):
    """Error response schema: `{success: false, error, errorCode}`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = False
    error: str = Field(description="Public error message.", examples=["No fileName provided"])
    error_code: str = Field(description="Exception code in constant case.", examples=["MISSING_FIELD_EXCEPTION"])
    additional_info: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional computer-readable information.",
        examples=[{}],
    )
