"""JSON schemas for the broker publish API"""

from typing import Any, Dict

import jsonschema

from ..api.exceptions import InvalidRequestError, ProtocolError
from ..models.publish import PublishStatus

_STATUS_VALUES = [status.value for status in PublishStatus]

START_REQUEST_SCHEMA = {
    "type": "object",
    "required": ["ownerId", "bundleHash", "bundleSize"],
    "properties": {
        "ownerId": {"type": "integer"},
        "bundleHash": {"type": "string", "pattern": "^[0-9a-f]{64}$"},
        "bundleSize": {"type": "integer", "minimum": 0},
        "ownerName": {"type": "string"},
    },
}

START_RESPONSE_SCHEMA = {
    "type": "object",
    "required": ["jobId", "status"],
    "properties": {
        "jobId": {"type": "string", "minLength": 1},
        "status": {"enum": _STATUS_VALUES},
        "uploadUrl": {"type": "string", "minLength": 1},
    },
}

STATUS_RESPONSE_SCHEMA = {
    "type": "object",
    "required": ["status"],
    "properties": {
        "status": {"enum": _STATUS_VALUES},
        "progress": {"type": "number", "minimum": 0, "maximum": 100},
        "message": {"type": "string"},
        "url": {"type": "string"},
        "error": {"type": "string"},
    },
}

CANCEL_RESPONSE_SCHEMA = {
    "type": "object",
    "required": ["success", "status"],
    "properties": {
        "success": {"type": "boolean"},
        "status": {"enum": _STATUS_VALUES},
    },
}

ERROR_BODY_SCHEMA = {
    "type": "object",
    "required": ["error"],
    "properties": {
        "error": {"type": "string"},
        "message": {"type": "string"},
    },
}


def validate_payload(data: Any, schema: Dict[str, Any], what: str) -> Dict[str, Any]:
    """
    Validate a broker payload against a schema

    Args:
        data: Decoded JSON
        schema: JSON schema
        what: Payload name used in the error message

    Returns:
        The payload, unchanged

    Raises:
        ProtocolError: Payload does not match the schema
    """
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ProtocolError(f"Invalid {what}: {e.message}") from e
    return data


def is_error_body(data: Any) -> bool:
    """Check whether a decoded body is a structured broker error"""
    return jsonschema.Draft7Validator(ERROR_BODY_SCHEMA).is_valid(data)


def validate_request(data: Dict[str, Any], schema: Dict[str, Any], what: str) -> Dict[str, Any]:
    """
    Validate an outgoing request body before it is sent

    Raises:
        InvalidRequestError: Request does not match the schema
    """
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise InvalidRequestError(f"Invalid {what}: {e.message}") from e
    return data
