"""Derive resource and method names from an operationId.

operationIds are dot-delimited: {service}.{...}.{resource}.{action}.

Examples (compute):
  compute.instances.aggregatedList   -> resource instances, method aggregated_list
  compute.instances.getIamPolicy     -> resource instances_iam_policies
  compute.instanceGroupManagers.listManagedInstances
                                     -> resource instance_group_managers_managed_instances
  compute.projects.removeProject     -> resource project (placeholder dropped)

Services listed in overrides.FULLY_QUALIFIED_SERVICES get method names built
from every token after the service:
  logging.entries.list               -> method entries_list
"""

from __future__ import annotations

import re

from .errors import MalformedOperationIdError
from .overrides import DEFAULT_OVERRIDES, Overrides

# Brand names kept as a single word whatever their casing
BRAND_EXCEPTIONS: tuple[str, ...] = ("gitlab", "github", "dotcom")

# Actions that address the IAM policy attached to a resource
IAM_POLICY_ACTIONS = frozenset({
    "getIamPolicy",
    "setIamPolicy",
    "testIamPermissions",
    "analyzeIamPolicy",
    "analyzeIamPolicyLongrunning",
    "searchAllIamPolicies",
})

# Scanned in order, first match wins
RESOURCE_VERBS: tuple[str, ...] = (
    "get",
    "list",
    "delete",
    "batchGet",
    "remove",
    "create",
    "add",
    "update",
    "fetch",
    "retrieve",
)

# Container tokens dropped when the action names the real resource
PLACEHOLDER_RESOURCES = frozenset({
    "organizations",
    "folders",
    "projects",
    "locations",
})

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_UNDERSCORE_RUN = re.compile(r"_{2,}")


def normalize_exceptions(name: str, exceptions: tuple[str, ...] = BRAND_EXCEPTIONS) -> str:
    """Rewrite every case-insensitive occurrence of an exception in its canonical form."""
    for exception in exceptions:
        name = re.sub(re.escape(exception), exception, name, flags=re.IGNORECASE)
    return name


def insert_word_boundaries(name: str) -> str:
    """Insert '_' between a lowercase letter or digit and a following capital."""
    return _WORD_BOUNDARY.sub(r"\1_\2", name)


def to_snake_case(name: str, exceptions: tuple[str, ...] = BRAND_EXCEPTIONS) -> str:
    """Convert camelCase or PascalCase to snake_case.

    Brand exceptions are normalized before boundaries are inserted, so
    'GitLabProjects' becomes 'gitlab_projects' rather than 'git_lab_projects'.
    """
    return insert_word_boundaries(normalize_exceptions(name, exceptions)).lower()


def split_operation_id(operation_id: str) -> list[str]:
    """Split an operationId into its dot tokens (at least two)."""
    tokens = operation_id.split(".")
    if len(tokens) < 2:
        raise MalformedOperationIdError(operation_id)
    return tokens


def _apply_action(resource: str, action: str) -> str:
    """Rename the resource based on what the action acts upon."""
    if action in IAM_POLICY_ACTIONS:
        return f"{resource}_iam_policies"

    for verb in RESOURCE_VERBS:
        if action.startswith(verb) and action != verb:
            suffix = to_snake_case(action[len(verb):])
            if resource in PLACEHOLDER_RESOURCES:
                return suffix
            return f"{resource}_{suffix}"

    return resource


def _normalize_resource(resource: str) -> str:
    resource = _UNDERSCORE_RUN.sub("_", resource)
    if resource.startswith("_"):
        resource = resource[1:]
    return resource


def resolve_resource(
    service: str,
    operation_id: str,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> tuple[str, str]:
    """Return (resource, action) for an operationId.

    An operationId override short-circuits everything else; a resource
    name override is applied last to the computed name.
    """
    tokens = split_operation_id(operation_id)
    action = tokens[-1]

    override = overrides.resource_for_operation(service, operation_id)
    if override:
        return override, action

    resource = to_snake_case(tokens[-2])
    resource = _apply_action(resource, action)
    resource = _normalize_resource(resource)
    resource = overrides.resource_for_name(service, resource)

    return resource, action


def resolve_method_name(
    service: str,
    operation_id: str,
    overrides: Overrides = DEFAULT_OVERRIDES,
) -> str:
    """Return the method name exposed for an operationId."""
    tokens = split_operation_id(operation_id)
    if overrides.is_fully_qualified(service):
        return to_snake_case("_".join(tokens[1:]))
    return to_snake_case(tokens[-1])
