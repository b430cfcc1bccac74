"""Load an OpenAPI document and extract paths, schemas and refs.

Accepts a local path or an http(s) URL, in JSON or YAML.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import yaml

from .errors import SpecLoadError

logger = logging.getLogger(__name__)

HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def _decode(text: str, name: str) -> dict[str, Any]:
    """Decode a .json document as JSON, anything else as YAML."""
    try:
        if name.endswith(".json"):
            data = json.loads(text)
        else:
            # YAML is a superset of JSON
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SpecLoadError(f"cannot decode {name}: {e}") from e

    if not isinstance(data, dict):
        raise SpecLoadError(f"{name} does not contain an OpenAPI document")
    return data


def _fetch(url: str, client: httpx.Client | None) -> str:
    try:
        if client is None:
            with httpx.Client(timeout=30.0, follow_redirects=True) as owned:
                resp = owned.get(url)
                resp.raise_for_status()
                return resp.text
        resp = client.get(url)
        resp.raise_for_status()
        return resp.text
    except httpx.HTTPError as e:
        raise SpecLoadError(f"cannot fetch {url}: {e}") from e


def load_spec(source: str | Path, client: httpx.Client | None = None) -> dict[str, Any]:
    """Load an OpenAPI document from a file or URL."""
    if _is_url(source):
        logger.info("Fetching %s", source)
        text = _fetch(str(source), client)
        name = httpx.URL(str(source)).path
    else:
        path = Path(source)
        try:
            text = path.read_text()
        except OSError as e:
            raise SpecLoadError(f"cannot read {path}: {e}") from e
        name = path.name
    return _decode(text, name)


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the document."""
    return spec.get("paths", {})


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract component schemas from the document."""
    return spec.get("components", {}).get("schemas", {})


def infer_service(spec: dict[str, Any]) -> str | None:
    """Guess the service name from the first token of the first operationId."""
    for path_item in get_paths(spec).values():
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if operation and operation.get("operationId"):
                return operation["operationId"].split(".")[0].lower()
    return None
