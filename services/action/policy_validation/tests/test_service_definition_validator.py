"""Unit tests for service definition consistency checks."""

from __future__ import annotations

import pytest

from services.action.policy_validation.data.repository import InMemoryServiceStore
from services.action.policy_validation.domain import (
    AccessTypeDef,
    ConfigDef,
    EnumDef,
    ResourceDef,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.failures import FailureCondition
from services.action.policy_validation.implementation import (
    ServiceDefinitionValidator,
)
from services.action.policy_validation.metadata_index import MetadataIndex
from services.action.policy_validation.service import ValidationFailedError


def _definition(**overrides) -> ServiceDefinition:
    values = {
        "id": 1,
        "name": "hive",
        "resources": (
            ResourceDef(name="database", mandatory=True, validation_pattern="[a-z]+"),
            ResourceDef(name="table"),
        ),
        "access_types": (
            AccessTypeDef(name="select"),
            AccessTypeDef(name="update"),
            AccessTypeDef(name="all", implied_grants=("Select", "update")),
        ),
        "enums": (
            EnumDef(name="authnType", elements=("none", "kerberos"), default_index=1),
        ),
        "configs": (ConfigDef(name="jdbc.url", mandatory=True),),
    }
    values.update(overrides)
    return ServiceDefinition(**values)


def _validator(*definitions: ServiceDefinition) -> ServiceDefinitionValidator:
    store = InMemoryServiceStore(service_definitions=definitions)
    return ServiceDefinitionValidator(index=MetadataIndex(store))


def _candidate_failures(candidate: ServiceDefinition, *stored: ServiceDefinition):
    with pytest.raises(ValidationFailedError) as excinfo:
        _validator(*stored).validate_candidate(
            candidate=candidate, action=ValidationAction.CREATE
        )
    return [
        (f.field_name, f.sub_field_name, f.condition) for f in excinfo.value.failures
    ]


def test_consistent_definition_is_valid() -> None:
    validator = _validator(_definition())

    validator.validate(entity_id=1, action=ValidationAction.UPDATE)
    validator.validate_candidate(
        candidate=_definition(id=None, name="hive2"), action=ValidationAction.CREATE
    )


def test_definition_without_optional_sections_is_valid() -> None:
    _validator().validate_candidate(
        candidate=ServiceDefinition(name="bare"), action=ValidationAction.CREATE
    )


def test_duplicate_definition_name_is_invalid() -> None:
    failures = _candidate_failures(_definition(id=None), _definition(id=1))

    assert failures == [("name", "", FailureCondition.INVALID_VALUE)]


def test_resource_defs_reject_blank_duplicate_and_bad_pattern() -> None:
    failures = _candidate_failures(
        _definition(
            resources=(
                ResourceDef(name=""),
                ResourceDef(name="Database"),
                ResourceDef(name="database"),
                ResourceDef(name="path", validation_pattern="(["),
            )
        )
    )

    assert failures == [
        ("resources", "", FailureCondition.MISSING),
        ("resources", "database", FailureCondition.INVALID_VALUE),
        ("resources", "path", FailureCondition.INVALID_VALUE),
    ]


def test_access_type_defs_reject_bad_implied_grants() -> None:
    failures = _candidate_failures(
        _definition(
            access_types=(
                AccessTypeDef(name="select"),
                AccessTypeDef(name="SELECT"),
                AccessTypeDef(name=None),
                AccessTypeDef(name="all", implied_grants=("select", "", "drop")),
            )
        )
    )

    assert failures == [
        ("access_types", "select", FailureCondition.INVALID_VALUE),
        ("access_types", "", FailureCondition.MISSING),
        ("access_types", "all", FailureCondition.INVALID_VALUE),
        ("access_types", "all", FailureCondition.INVALID_VALUE),
    ]


def test_enum_defs_require_elements_and_in_range_default() -> None:
    failures = _candidate_failures(
        _definition(
            enums=(
                EnumDef(name=""),
                EnumDef(name="empty"),
                EnumDef(name="outOfRange", elements=("a", "b"), default_index=2),
                EnumDef(name="negative", elements=("a",), default_index=-1),
                EnumDef(name="implicit", elements=("a",)),
            )
        )
    )

    assert failures == [
        ("enums", "", FailureCondition.MISSING),
        ("enums", "empty", FailureCondition.MISSING),
        ("enums", "outOfRange", FailureCondition.INVALID_VALUE),
        ("enums", "negative", FailureCondition.INVALID_VALUE),
    ]


def test_config_defs_reject_blank_and_duplicate_names() -> None:
    failures = _candidate_failures(
        _definition(
            configs=(
                ConfigDef(name="jdbc.url"),
                ConfigDef(name="jdbc.url", mandatory=True),
                ConfigDef(name="JDBC.URL"),
                ConfigDef(name=" "),
            )
        )
    )

    assert failures == [
        ("configs", "jdbc.url", FailureCondition.INVALID_VALUE),
        ("configs", "", FailureCondition.MISSING),
    ]


def test_unknown_definition_id_is_not_found() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        _validator().validate(entity_id=7, action=ValidationAction.UPDATE)

    assert excinfo.value.failures[0].condition is FailureCondition.NOT_FOUND
