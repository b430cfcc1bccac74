"""Inspect response schemas to decide whether an operation is selectable.

A response is selectable as rows when none of its top-level properties is
an open-ended map (declares additionalProperties). Map-shaped responses,
and responses with no properties at all, are classified exec.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .errors import SchemaNotFoundError

_logger = logging.getLogger(__name__)


class WarningSink(Protocol):
    def warning(self, msg: str, *args: Any) -> Any: ...


def get_response_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Return the 200 application/json response schema, if any.

    YAML documents with an unquoted 200 key load it as an int.
    """
    responses = operation.get("responses", {})
    return (
        responses.get("200", responses.get(200, {}))
        .get("content", {})
        .get("application/json", {})
        .get("schema")
    )


def lookup_schema(
    ref: str,
    schemas: dict[str, Any],
    label: str | None = None,
) -> dict[str, Any]:
    """Find a schema by the last segment of its $ref."""
    name = ref.split("/")[-1]
    if name not in schemas:
        raise SchemaNotFoundError(ref, label)
    return schemas[name]


def has_map_properties(schema: dict[str, Any]) -> bool:
    """True if any property declares additionalProperties."""
    return any(
        "additionalProperties" in prop
        for prop in schema.get("properties", {}).values()
    )


def classify_by_schema(
    operation: dict[str, Any],
    schemas: dict[str, Any],
    *,
    label: str | None = None,
    logger: WarningSink | None = None,
) -> str:
    """Return 'select' for flat responses and 'exec' otherwise.

    ``label`` identifies the operation in messages (e.g. service and
    operationId). ``logger`` receives the warning emitted for schemas
    without properties and defaults to this module's logger.
    """
    logger = logger or _logger

    schema = get_response_schema(operation)
    if schema is None:
        raise SchemaNotFoundError(None, label)

    ref = schema.get("$ref")
    if ref is not None:
        schema = lookup_schema(ref, schemas, label)
    else:
        ref = "<inline>"

    if schema.get("properties") is None:
        logger.warning("schema properties not found for %s (%s)", ref, label or "unknown operation")
        return "exec"

    return "exec" if has_map_properties(schema) else "select"
