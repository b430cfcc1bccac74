"""Manual override tables and per-service naming policy.

Three exact-match tables, each keyed by service first:

  resource_by_operation_id[service][operationId] -> resource name
  resource_by_name[service][resource]             -> resource name
  sql_verb_by_operation_id[service][operationId]  -> sql verb

plus the list of services whose method names are fully qualified
(see naming.resolve_method_name).

The built-in tables below are frozen into DEFAULT_OVERRIDES at import.
load_overrides() layers a YAML file on top of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import yaml

from .errors import OverridesError

logger = logging.getLogger(__name__)

SQL_VERBS = frozenset({"select", "insert", "delete", "exec"})

# Services whose operationIds are not disambiguated by the action alone
FULLY_QUALIFIED_SERVICES: tuple[str, ...] = (
    "accessapproval",
    "analyticshub",
    "apigee",
    "apigeeregistry",
    "beyondcorp",
    "bigquerydatatransfer",
    "cloudbuild",
    "container",
    "containeranalysis",
    "datacatalog",
    "dataflow",
    "datalabeling",
    "dataplex",
    "dataproc",
    "dialogflow",
    "discoveryengine",
    "dlp",
    "documentai",
    "essentialcontacts",
    "gkehub",
    "gkeonprem",
    "integrations",
    "logging",
    "ml",
    "monitoring",
    "networksecurity",
    "orgpolicy",
    "policysimulator",
    "prod_tt_sasportal",
    "pubsub",
    "pubsublite",
    "recommendationengine",
    "recommender",
    "resourcesettings",
    "retail",
    "sasportal",
    "securitycenter",
    "spanner",
    "translate",
    "videointelligence",
    "vision",
)

_RESOURCE_BY_OPERATION_ID: dict[str, dict[str, str]] = {
    "compute": {
        "compute.projects.get": "projects",
        "compute.projects.getXpnHost": "xpn_host",
        "compute.projects.getXpnResources": "xpn_resources",
        "compute.projects.listXpnHosts": "xpn_hosts",
        "compute.projects.enableXpnHost": "xpn_host",
        "compute.projects.disableXpnHost": "xpn_host",
        "compute.projects.enableXpnResource": "xpn_resources",
        "compute.projects.disableXpnResource": "xpn_resources",
        "compute.projects.moveDisk": "disks",
        "compute.projects.moveInstance": "instances",
        "compute.projects.setCommonInstanceMetadata": "common_instance_metadata",
        "compute.projects.setUsageExportBucket": "usage_export_bucket",
        "compute.projects.setDefaultNetworkTier": "default_network_tier",
    },
    "storage": {
        "storage.objects.compose": "objects",
        "storage.objects.rewrite": "objects",
        "storage.objects.copy": "objects",
    },
    "cloudresourcemanager": {
        "cloudresourcemanager.projects.search": "projects",
        "cloudresourcemanager.folders.search": "folders",
        "cloudresourcemanager.organizations.search": "organizations",
    },
}

_RESOURCE_BY_NAME: dict[str, dict[str, str]] = {
    "compute": {
        "instances_effective_firewalls": "effective_firewalls",
        "networks_effective_firewalls": "network_effective_firewalls",
        "instances_serial_port_output": "serial_port_output",
        "instances_screenshot": "screenshot",
        "instances_guest_attributes": "guest_attributes",
    },
    "iam": {
        "roles_roles": "roles",
    },
    "storage": {
        "objects_iam_policies": "object_iam_policies",
        "buckets_iam_policies": "bucket_iam_policies",
    },
}

_SQL_VERB_BY_OPERATION_ID: dict[str, dict[str, str]] = {
    "compute": {
        "compute.projects.get": "select",
        "compute.instances.getSerialPortOutput": "select",
        "compute.instances.getScreenshot": "select",
        "compute.projects.removeProject": "exec",
    },
    "storage": {
        "storage.objects.list": "select",
        "storage.objects.get": "select",
    },
    "cloudresourcemanager": {
        "cloudresourcemanager.projects.search": "select",
        "cloudresourcemanager.folders.search": "select",
        "cloudresourcemanager.organizations.search": "select",
    },
}


def _freeze(tables: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    """Return a read-only copy of a two-level table."""
    return MappingProxyType(
        {service: MappingProxyType(dict(entries)) for service, entries in tables.items()}
    )


@dataclass(frozen=True)
class Overrides:
    """Immutable bundle of override tables and the naming policy."""

    resource_by_operation_id: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _freeze({})
    )
    resource_by_name: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _freeze({})
    )
    sql_verb_by_operation_id: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: _freeze({})
    )
    fully_qualified_services: frozenset[str] = frozenset()

    @classmethod
    def from_tables(
        cls,
        resource_by_operation_id: Mapping[str, Mapping[str, str]] | None = None,
        resource_by_name: Mapping[str, Mapping[str, str]] | None = None,
        sql_verb_by_operation_id: Mapping[str, Mapping[str, str]] | None = None,
        fully_qualified_services: Iterable[str] = (),
    ) -> Overrides:
        """Build an Overrides from plain dicts, validating SQL verbs."""
        verbs = sql_verb_by_operation_id or {}
        for service, entries in verbs.items():
            for operation_id, verb in entries.items():
                if verb not in SQL_VERBS:
                    raise OverridesError(
                        f"invalid sql verb {verb!r} for {service}/{operation_id}"
                        f" (expected one of {', '.join(sorted(SQL_VERBS))})"
                    )
        return cls(
            resource_by_operation_id=_freeze(resource_by_operation_id or {}),
            resource_by_name=_freeze(resource_by_name or {}),
            sql_verb_by_operation_id=_freeze(verbs),
            fully_qualified_services=frozenset(fully_qualified_services),
        )

    def resource_for_operation(self, service: str, operation_id: str) -> str | None:
        return self.resource_by_operation_id.get(service, {}).get(operation_id)

    def resource_for_name(self, service: str, resource: str) -> str:
        """Return the renamed resource, or the resource itself."""
        return self.resource_by_name.get(service, {}).get(resource) or resource

    def sql_verb_for_operation(self, service: str, operation_id: str) -> str | None:
        return self.sql_verb_by_operation_id.get(service, {}).get(operation_id)

    def is_fully_qualified(self, service: str) -> bool:
        return service in self.fully_qualified_services


DEFAULT_OVERRIDES = Overrides.from_tables(
    resource_by_operation_id=_RESOURCE_BY_OPERATION_ID,
    resource_by_name=_RESOURCE_BY_NAME,
    sql_verb_by_operation_id=_SQL_VERB_BY_OPERATION_ID,
    fully_qualified_services=FULLY_QUALIFIED_SERVICES,
)

_FILE_KEYS = {
    "resource_by_operation_id",
    "resource_by_name",
    "sql_verb_by_operation_id",
    "fully_qualified_services",
}


def _merge(
    base: Mapping[str, Mapping[str, str]],
    extra: Mapping[str, Mapping[str, str]],
) -> dict[str, dict[str, str]]:
    merged = {service: dict(entries) for service, entries in base.items()}
    for service, entries in extra.items():
        merged.setdefault(service, {}).update(entries)
    return merged


def _check_table(name: str, table: Any) -> dict[str, dict[str, str]]:
    if not isinstance(table, dict):
        raise OverridesError(f"{name} must be a mapping of service -> table")
    for service, entries in table.items():
        if not isinstance(entries, dict):
            raise OverridesError(f"{name}.{service} must be a mapping")
    return table


def load_overrides(
    path: str | Path,
    base: Overrides = DEFAULT_OVERRIDES,
    merge: bool = True,
) -> Overrides:
    """Load override tables from a YAML file.

    With merge=True the file's entries are layered per service on top of
    ``base``; otherwise the file replaces the tables entirely.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise OverridesError(f"cannot read overrides file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise OverridesError(f"cannot parse overrides file {path}: {e}") from e

    if not isinstance(data, dict):
        raise OverridesError(f"overrides file {path} must contain a mapping")
    unknown = set(data) - _FILE_KEYS
    if unknown:
        raise OverridesError(
            f"unknown keys in overrides file {path}: {', '.join(sorted(unknown))}"
        )

    by_op = _check_table("resource_by_operation_id", data.get("resource_by_operation_id", {}))
    by_name = _check_table("resource_by_name", data.get("resource_by_name", {}))
    verbs = _check_table("sql_verb_by_operation_id", data.get("sql_verb_by_operation_id", {}))
    services = data.get("fully_qualified_services", [])
    if not isinstance(services, list):
        raise OverridesError("fully_qualified_services must be a list")

    if merge:
        by_op = _merge(base.resource_by_operation_id, by_op)
        by_name = _merge(base.resource_by_name, by_name)
        verbs = _merge(base.sql_verb_by_operation_id, verbs)
        services = [*base.fully_qualified_services, *services]

    logger.debug("Loaded overrides from %s (merge=%s)", path, merge)
    return Overrides.from_tables(by_op, by_name, verbs, services)
