"""Inbound request validation."""
import logging
from typing import Any, List

from pydantic import ValidationError

from models.api import AssistRequest, FieldViolation
from services.errors import RequestValidationError
from config import MAX_INPUT_CHARS, MAX_IDENTIFIER_CHARS, REQUIRE_UUID_IDS

logger = logging.getLogger(__name__)

# Map every accepted spelling to the name reported back to the client
_FIELD_NAMES = {
    "userId": "userId",
    "user_id": "userId",
    "sessionId": "sessionId",
    "session_id": "sessionId",
    "input": "input",
}


def validate_request(
    payload: Any,
    max_input_chars: int = MAX_INPUT_CHARS,
    max_identifier_chars: int = MAX_IDENTIFIER_CHARS,
    require_uuid_ids: bool = REQUIRE_UUID_IDS
) -> AssistRequest:
    """
    Validate an untyped request payload.

    Every violated field is reported, not only the first one.

    Args:
        payload: Decoded JSON body
        max_input_chars: Upper bound on the length of ``input``
        max_identifier_chars: Upper bound on the length of user and session ids
        require_uuid_ids: Whether user and session ids must be UUIDs

    Returns:
        Validated AssistRequest

    Raises:
        RequestValidationError: Listing each violated field
    """
    try:
        return AssistRequest.model_validate(
            payload,
            context={
                "max_input_chars": max_input_chars,
                "max_identifier_chars": max_identifier_chars,
                "require_uuid_ids": require_uuid_ids,
            },
        )
    except ValidationError as e:
        violations = _collect_violations(e)
        logger.info(
            f"Rejected request: {len(violations)} violation(s)",
            extra={"fields": [v.field for v in violations]}
        )
        raise RequestValidationError(violations) from e


def _collect_violations(error: ValidationError) -> List[FieldViolation]:
    violations: List[FieldViolation] = []
    seen = set()
    for item in error.errors():
        loc = item.get("loc") or ()
        name = _FIELD_NAMES.get(str(loc[0]), str(loc[0])) if loc else "body"
        if name in seen:
            continue
        seen.add(name)
        violations.append(FieldViolation(field=name, message=_clean_message(item.get("msg", "invalid"))))
    return violations


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    return msg[len("Value error, "):] if msg.startswith("Value error, ") else msg
