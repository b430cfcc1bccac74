"""Tag every operation of an OpenAPI document and group them by resource.

Each operation is annotated in place with:
  x-stackQL-resource  resource name
  x-stackQL-method    method name (unique within the resource)
  x-stackQL-verb      select | insert | delete | exec

and the returned context feeds codegen's inventory template.
"""

from __future__ import annotations

import logging
from typing import Any

from .loader import HTTP_METHODS, get_paths, get_schemas
from .naming import resolve_method_name, resolve_resource
from .overrides import DEFAULT_OVERRIDES, Overrides
from .sql_verbs import resolve_sql_verb

logger = logging.getLogger(__name__)

RESOURCE_KEY = "x-stackQL-resource"
METHOD_KEY = "x-stackQL-method"
VERB_KEY = "x-stackQL-verb"


def tag_operation(
    service: str,
    path: str,
    http_verb: str,
    operation: dict[str, Any],
    schemas: dict[str, Any],
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> dict[str, Any]:
    """Resolve resource, method and SQL verb for a single operation."""
    operation_id = operation["operationId"]
    resource, action = resolve_resource(service, operation_id, overrides)
    method = resolve_method_name(service, operation_id, overrides)
    sql_verb = resolve_sql_verb(
        service, resource, action, operation_id, path, http_verb,
        operation, schemas, overrides,
    )
    return {
        "operation_id": operation_id,
        "path": path,
        "http_verb": http_verb,
        "resource": resource,
        "action": action,
        "method": method,
        "sql_verb": sql_verb,
    }


def _deduplicate_method_names(records: list[dict[str, Any]]) -> None:
    """Ensure method names are unique within each resource.

    A repeated name first gets the HTTP verb appended, then a counter.
    """
    seen: dict[tuple[str, str], int] = {}
    for record in records:
        key = (record["resource"], record["method"])
        if key in seen:
            seen[key] += 1
            renamed = f"{record['method']}_{record['http_verb']}"
            logger.warning(
                "duplicate method %s on resource %s, renaming %s to %s",
                record["method"], record["resource"], record["operation_id"], renamed,
            )
            record["method"] = renamed
        else:
            seen[key] = 1

    final_seen: dict[tuple[str, str], int] = {}
    for record in records:
        key = (record["resource"], record["method"])
        if key in final_seen:
            final_seen[key] += 1
            record["method"] = f"{record['method']}_{final_seen[key]}"
        else:
            final_seen[key] = 1


def _group_by_resource(records: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    resources: dict[str, dict[str, Any]] = {}
    for record in records:
        entry = resources.setdefault(record["resource"], {"methods": [], "sql_verbs": {}})
        entry["methods"].append(record)
        entry["sql_verbs"].setdefault(record["sql_verb"], []).append(record["method"])
    return dict(sorted(resources.items()))


def build_context(
    spec: dict[str, Any],
    service: str,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> dict[str, Any]:
    """Tag all operations in ``spec`` and build the inventory context."""
    schemas = get_schemas(spec)
    records: list[dict[str, Any]] = []
    operations: list[dict[str, Any]] = []

    for path, path_item in sorted(get_paths(spec).items()):
        for http_verb in HTTP_METHODS:
            if http_verb not in path_item:
                continue

            operation = path_item[http_verb]
            if not operation.get("operationId"):
                logger.warning("skipping %s %s: no operationId", http_verb.upper(), path)
                continue

            records.append(tag_operation(service, path, http_verb, operation, schemas, overrides))
            operations.append(operation)

    _deduplicate_method_names(records)

    for record, operation in zip(records, operations):
        operation[RESOURCE_KEY] = record["resource"]
        operation[METHOD_KEY] = record["method"]
        operation[VERB_KEY] = record["sql_verb"]

    resources = _group_by_resource(records)
    logger.info(
        "Tagged %d operations into %d resources for %s",
        len(records), len(resources), service,
    )

    return {
        "service": service,
        "version": spec.get("info", {}).get("version", "unknown"),
        "operations": records,
        "resources": resources,
        "operation_count": len(records),
    }
