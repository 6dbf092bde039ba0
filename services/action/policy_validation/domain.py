"""Domain contracts for service definitions, services, and policies under validation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ValidationAction(str, Enum):
    """Lifecycle operation a candidate entity is validated against."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class _DomainModel(BaseModel):
    """Base model for read-only validation inputs."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ResourceDef(_DomainModel):
    """One resource type declared by a service definition."""

    name: str | None = None
    mandatory: bool = False
    validation_pattern: str | None = None


class AccessTypeDef(_DomainModel):
    """One access type and the other access types it implies."""

    name: str | None = None
    implied_grants: tuple[str | None, ...] | None = None


class EnumDef(_DomainModel):
    """Enumeration of allowed values with an optional default index."""

    name: str | None = None
    elements: tuple[str, ...] = ()
    default_index: int | None = None


class ConfigDef(_DomainModel):
    """One configuration parameter a service of this type may declare."""

    name: str | None = None
    mandatory: bool = False


class ServiceDefinition(_DomainModel):
    """Schema describing a pluggable service type."""

    id: int | None = None
    name: str | None = None
    resources: tuple[ResourceDef, ...] | None = None
    access_types: tuple[AccessTypeDef, ...] | None = None
    enums: tuple[EnumDef, ...] | None = None
    configs: tuple[ConfigDef, ...] | None = None


class Service(_DomainModel):
    """Registered service instance bound to one service definition by type name."""

    id: int | None = None
    name: str | None = None
    type: str | None = None
    configs: dict[str, str] | None = None


class PolicyResource(_DomainModel):
    """Literal values a policy supplies for one resource type."""

    values: tuple[str, ...] = ()
    is_excludes: bool = False
    is_recursive: bool = False


class PolicyItemAccess(_DomainModel):
    """One access type granted (or not) by a policy item."""

    type: str
    is_allowed: bool = True


class PolicyItem(_DomainModel):
    """Grant of a set of access types to users and groups."""

    accesses: tuple[PolicyItemAccess, ...] = ()
    users: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()


class Policy(_DomainModel):
    """Access-control policy over one service's resource types."""

    id: int | None = None
    name: str | None = None
    service: str | None = None
    resources: dict[str, PolicyResource] | None = None
    policy_items: tuple[PolicyItem, ...] = Field(default_factory=tuple)
    is_audit_enabled: bool | None = None
    is_enabled: bool = True
