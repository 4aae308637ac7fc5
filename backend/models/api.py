"""API request models."""
import uuid
from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, ValidationInfo, field_validator


@dataclass(frozen=True)
class FieldViolation:
    """One violated request field."""
    field: str
    message: str


class AssistRequest(BaseModel):
    """Inbound assist request.

    Accepts camelCase names and the snake_case aliases older clients send.
    Limits are read from the validation context:
    ``max_input_chars``, ``max_identifier_chars`` and ``require_uuid_ids``.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    user_id: StrictStr = Field(validation_alias=AliasChoices("userId", "user_id"))
    session_id: StrictStr = Field(validation_alias=AliasChoices("sessionId", "session_id"))
    input: StrictStr

    @field_validator("user_id", "session_id")
    @classmethod
    def _check_identifier(cls, value: str, info: ValidationInfo) -> str:
        context = info.context or {}
        if not value:
            raise ValueError("must be a non-empty identifier")
        max_chars = context.get("max_identifier_chars")
        if max_chars and len(value) > max_chars:
            raise ValueError(f"must be at most {max_chars} characters")
        if context.get("require_uuid_ids"):
            try:
                uuid.UUID(value)
            except ValueError:
                raise ValueError("must be a UUID")
        return value

    @field_validator("input")
    @classmethod
    def _check_input(cls, value: str, info: ValidationInfo) -> str:
        context = info.context or {}
        if not value:
            raise ValueError("must be a non-empty string")
        max_chars = context.get("max_input_chars")
        if max_chars and len(value) > max_chars:
            raise ValueError(f"must be at most {max_chars} characters")
        return value
