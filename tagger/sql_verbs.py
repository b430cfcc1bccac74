"""Map an operation to the SQL verb it is exposed as.

Rules, later ones winning:
  - exec by default
  - get/list/aggregatedList over HTTP GET      -> select
  - insert/create over HTTP POST               -> insert
  - delete over HTTP DELETE                    -> delete
  - a select (other than aggregatedList) whose response is not flat -> exec
  - an operationId override replaces the result
"""

from __future__ import annotations

import logging
from typing import Any

from .overrides import DEFAULT_OVERRIDES, Overrides
from .schema_parser import WarningSink, classify_by_schema

_logger = logging.getLogger(__name__)

SELECT_ACTIONS: tuple[str, ...] = ("aggregatedList", "get", "list")
INSERT_ACTIONS: tuple[str, ...] = ("insert", "create")
DELETE_ACTIONS: tuple[str, ...] = ("delete",)

# (actions, required http verb, sql verb)
_VERB_RULES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (SELECT_ACTIONS, "get", "select"),
    (INSERT_ACTIONS, "post", "insert"),
    (DELETE_ACTIONS, "delete", "delete"),
)


def _matches(action: str, prefixes: tuple[str, ...]) -> bool:
    return any(action.startswith(prefix) for prefix in prefixes)


def resolve_sql_verb(
    service: str,
    resource: str,
    action: str,
    operation_id: str,
    http_path: str,
    http_verb: str,
    operation: dict[str, Any],
    schemas: dict[str, Any],
    overrides: Overrides = DEFAULT_OVERRIDES,
    *,
    logger: WarningSink | None = None,
) -> str:
    """Return one of select, insert, delete or exec for an operation.

    ``logger`` receives the schema classifier's warning.
    """
    http_verb = http_verb.lower()
    sql_verb = "exec"

    for actions, required_http_verb, candidate in _VERB_RULES:
        if _matches(action, actions) and http_verb == required_http_verb:
            sql_verb = candidate

    if action != "aggregatedList" and sql_verb == "select":
        sql_verb = classify_by_schema(
            operation, schemas, label=f"{service} {operation_id}", logger=logger,
        )

    override = overrides.sql_verb_for_operation(service, operation_id)
    if override:
        _logger.debug(
            "%s %s (%s): sql verb %s overridden to %s",
            http_verb.upper(), http_path, resource, sql_verb, override,
        )
        sql_verb = override

    return sql_verb
