"""Schema-derived name sets and lookups used by the concrete validators.

Resource and access-type names compare case-insensitively; the canonical
in-memory form is lower-case. Config parameter names keep their case.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from packages.warden_shared.logging import get_logger
from services.action.policy_validation.domain import (
    AccessTypeDef,
    EnumDef,
    Policy,
    Service,
    ServiceDefinition,
)

_LOGGER = get_logger(__name__)

TValue = TypeVar("TValue")


def is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def mandatory_resource_names(service_def: ServiceDefinition | None) -> set[str]:
    """Return lower-cased names of resource types a policy must supply."""
    if service_def is None or not service_def.resources:
        return set()
    names: set[str] = set()
    for resource_def in service_def.resources:
        if not resource_def.mandatory:
            continue
        if is_blank(resource_def.name):
            _LOGGER.warning("Skipping mandatory resource def with blank name")
            continue
        names.add(resource_def.name.lower())
    return names


def all_resource_names(service_def: ServiceDefinition | None) -> set[str]:
    """Return lower-cased names of every declared resource type."""
    if service_def is None or not service_def.resources:
        return set()
    names: set[str] = set()
    for resource_def in service_def.resources:
        if is_blank(resource_def.name):
            _LOGGER.warning("Skipping resource def with blank name")
            continue
        names.add(resource_def.name.lower())
    return names


def access_type_names(service_def: ServiceDefinition | None) -> set[str]:
    """Return lower-cased access-type names, skipping blank entries."""
    if service_def is None or not service_def.access_types:
        return set()
    names: set[str] = set()
    for access_type_def in service_def.access_types:
        if is_blank(access_type_def.name):
            _LOGGER.warning("Skipping access type def with blank name")
            continue
        names.add(access_type_def.name.lower())
    return names


def policy_resource_names(policy: Policy | None) -> set[str]:
    """Return lower-cased resource-type keys supplied by a policy."""
    if policy is None or not policy.resources:
        return set()
    return {name.lower() for name in policy.resources}


def validation_patterns(service_def: ServiceDefinition | None) -> dict[str, str]:
    """Map resource name (original case) to its validation pattern.

    Resources without a pattern accept any value and are left out.
    """
    if service_def is None or not service_def.resources:
        return {}
    patterns: dict[str, str] = {}
    for resource_def in service_def.resources:
        if is_blank(resource_def.name):
            _LOGGER.warning("Skipping resource def with blank name")
            continue
        if is_blank(resource_def.validation_pattern):
            continue
        patterns[resource_def.name] = resource_def.validation_pattern
    return patterns


def implied_grants(access_type_def: AccessTypeDef | None) -> list[str | None] | None:
    """Return lower-cased implied grant names.

    ``None`` means there is no such access type, which callers must keep
    apart from an access type that implies nothing (an empty list). Blank
    entries are passed through untouched.
    """
    if access_type_def is None:
        return None
    if not access_type_def.implied_grants:
        return []
    return [
        grant if is_blank(grant) else grant.lower()
        for grant in access_type_def.implied_grants
    ]


def lower_cased_resource_map(
    resources: Mapping[str, TValue] | None,
) -> dict[str, TValue] | None:
    """Copy a policy resource map with lower-cased keys.

    Keys that differ only by case collapse onto one entry; the one iterated
    last wins.
    """
    if resources is None:
        return None
    return {name.lower(): value for name, value in resources.items()}


def required_config_names(service_def: ServiceDefinition | None) -> set[str]:
    """Return names of config parameters every service of this type must set."""
    if service_def is None or not service_def.configs:
        return set()
    return {
        config_def.name
        for config_def in service_def.configs
        if config_def.mandatory and not is_blank(config_def.name)
    }


def service_config_names(service: Service | None) -> set[str]:
    """Return config parameter names a service declares."""
    if service is None or service.configs is None:
        return set()
    return set(service.configs)


def is_audit_enabled(policy: Policy | None) -> bool:
    """Return whether auditing applies to a policy.

    An unset flag means enabled. An absent policy is never audited.
    """
    if policy is None:
        _LOGGER.warning("Audit flag requested for absent policy")
        return False
    if policy.is_audit_enabled is None:
        return True
    return policy.is_audit_enabled


def enum_default_index(enum_def: EnumDef | None) -> int:
    """Return the effective default index, or -1 when there is no enum."""
    if enum_def is None:
        return -1
    if enum_def.default_index is None:
        return 0
    return enum_def.default_index
