"""Shared fixtures: a small compute-style OpenAPI document and schemas."""

from __future__ import annotations

from typing import Any

import pytest

from tagger.overrides import Overrides

_BASE = "/compute/v1/projects/{project}"


def _json_response(ref: str) -> dict[str, Any]:
    return {
        "200": {
            "description": "Successful response",
            "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{ref}"}}},
        }
    }


def _op(operation_id: str, ref: str = "Operation") -> dict[str, Any]:
    return {"operationId": operation_id, "responses": _json_response(ref)}


def make_schemas() -> dict[str, Any]:
    return {
        "Instance": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "labels": {"type": "object", "additionalProperties": {"type": "string"}},
            },
        },
        "InstanceList": {
            "type": "object",
            "properties": {
                "items": {"type": "array", "items": {"$ref": "#/components/schemas/Instance"}},
                "nextPageToken": {"type": "string"},
            },
        },
        "InstanceAggregatedList": {
            "type": "object",
            "properties": {
                "items": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/components/schemas/InstanceList"},
                },
            },
        },
        "Policy": {
            "type": "object",
            "properties": {
                "bindings": {"type": "array", "items": {"type": "object"}},
                "etag": {"type": "string"},
            },
        },
        "SerialPortOutput": {
            "type": "object",
            "properties": {"contents": {"type": "string"}, "next": {"type": "string"}},
        },
        "Operation": {
            "type": "object",
            "properties": {"name": {"type": "string"}, "status": {"type": "string"}},
        },
        "Empty": {"type": "object"},
    }


def make_compute_spec() -> dict[str, Any]:
    return {
        "openapi": "3.0.0",
        "info": {"title": "Compute Engine API", "version": "v1"},
        "paths": {
            f"{_BASE}/aggregated/instances": {
                "get": _op("compute.instances.aggregatedList", "InstanceAggregatedList"),
            },
            f"{_BASE}/zones/{{zone}}/instances": {
                "get": _op("compute.instances.list", "InstanceList"),
                "post": _op("compute.instances.insert"),
            },
            f"{_BASE}/zones/{{zone}}/instances/{{instance}}": {
                "get": _op("compute.instances.get", "Instance"),
                "delete": _op("compute.instances.delete"),
            },
            f"{_BASE}/zones/{{zone}}/instances/{{instance}}/getIamPolicy": {
                "get": _op("compute.instances.getIamPolicy", "Policy"),
            },
            f"{_BASE}/zones/{{zone}}/instances/{{instance}}/serialPort": {
                "get": _op("compute.instances.getSerialPortOutput", "SerialPortOutput"),
            },
            f"{_BASE}/zones/{{zone}}/instances/{{instance}}/start": {
                "post": _op("compute.instances.start"),
            },
            f"{_BASE}/removeProject": {
                "post": _op("compute.projects.removeProject"),
            },
            f"{_BASE}/listXpnHosts": {
                "post": _op("compute.projects.listXpnHosts"),
            },
            f"{_BASE}/global/operations": {
                "get": {"responses": _json_response("Operation")},
            },
        },
        "components": {"schemas": make_schemas()},
    }


@pytest.fixture
def schemas() -> dict[str, Any]:
    return make_schemas()


@pytest.fixture
def compute_spec() -> dict[str, Any]:
    """A fresh document per test; build_context annotates it in place."""
    return make_compute_spec()


@pytest.fixture
def no_overrides() -> Overrides:
    return Overrides.from_tables()


@pytest.fixture
def response_op():
    """Build an operation whose 200 response references the named schema."""
    return _op
