"""Exceptions raised while tagging an OpenAPI document."""

from __future__ import annotations


class TaggingError(Exception):
    """Base class for all tagger errors."""


class MalformedOperationIdError(TaggingError, ValueError):
    """An operationId has fewer than two dot-separated tokens."""

    def __init__(self, operation_id: str) -> None:
        super().__init__(
            f"operationId {operation_id!r} must have at least two dot-separated tokens"
        )
        self.operation_id = operation_id


class SchemaNotFoundError(TaggingError, LookupError):
    """A response schema is missing or its $ref is not in the schema table."""

    def __init__(self, ref: str | None, label: str | None = None) -> None:
        where = f" ({label})" if label else ""
        if ref is None:
            message = f"no 200 application/json response schema{where}"
        else:
            message = f"schema {ref!r} not found{where}"
        super().__init__(message)
        self.ref = ref
        self.label = label


class OverridesError(TaggingError, ValueError):
    """An overrides file is malformed."""


class SpecLoadError(TaggingError):
    """An OpenAPI document could not be fetched or decoded."""
