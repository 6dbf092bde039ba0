"""Unit tests for service registration validation."""

from __future__ import annotations

import pytest

from services.action.policy_validation.data.repository import InMemoryServiceStore
from services.action.policy_validation.domain import (
    ConfigDef,
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.failures import FailureCondition
from services.action.policy_validation.implementation import ServiceValidator
from services.action.policy_validation.metadata_index import MetadataIndex
from services.action.policy_validation.service import ValidationFailedError


def _store(*services: Service) -> InMemoryServiceStore:
    return InMemoryServiceStore(
        service_definitions=(
            ServiceDefinition(
                id=1,
                name="hive",
                configs=(
                    ConfigDef(name="jdbc.url", mandatory=True),
                    ConfigDef(name="username", mandatory=True),
                    ConfigDef(name="commonNameForCertificate"),
                ),
            ),
        ),
        services=services,
    )


def _service(**overrides) -> Service:
    values = {
        "id": 10,
        "name": "hive_prod",
        "type": "hive",
        "configs": {"jdbc.url": "jdbc:hive2://h:10000", "username": "hive"},
    }
    values.update(overrides)
    return Service(**values)


def _validator(store: InMemoryServiceStore) -> ServiceValidator:
    return ServiceValidator(index=MetadataIndex(store))


def test_service_with_required_configs_is_valid() -> None:
    validator = _validator(_store(_service()))

    validator.validate(entity_id=10, action=ValidationAction.UPDATE)
    validator.validate_candidate(
        candidate=_service(id=None, name="hive_dev"), action=ValidationAction.CREATE
    )


def test_missing_required_configs_are_reported_sorted() -> None:
    validator = _validator(_store(_service(configs=None)))

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=10, action=ValidationAction.CREATE)

    assert [
        (f.field_name, f.sub_field_name, f.condition) for f in excinfo.value.failures
    ] == [
        ("configs", "jdbc.url", FailureCondition.MISSING),
        ("configs", "username", FailureCondition.MISSING),
    ]


def test_config_names_are_case_sensitive() -> None:
    validator = _validator(
        _store(_service(configs={"JDBC.URL": "x", "username": "hive"}))
    )

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=10, action=ValidationAction.CREATE)

    assert [f.sub_field_name for f in excinfo.value.failures] == ["jdbc.url"]


def test_unknown_service_type_is_not_found() -> None:
    validator = _validator(_store(_service(type="kafka")))

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=10, action=ValidationAction.CREATE)

    assert [(f.field_name, f.condition) for f in excinfo.value.failures] == [
        ("type", FailureCondition.NOT_FOUND)
    ]


def test_missing_name_and_type_are_reported() -> None:
    validator = _validator(_store(_service(name=None, type="")))

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=10, action=ValidationAction.CREATE)

    assert [(f.field_name, f.condition) for f in excinfo.value.failures] == [
        ("name", FailureCondition.MISSING),
        ("type", FailureCondition.MISSING),
    ]


def test_duplicate_service_name_is_invalid() -> None:
    validator = _validator(_store(_service()))

    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate_candidate(
            candidate=_service(id=None), action=ValidationAction.CREATE
        )

    assert [(f.field_name, f.condition) for f in excinfo.value.failures] == [
        ("name", FailureCondition.INVALID_VALUE)
    ]


def test_delete_checks_existence_only() -> None:
    validator = _validator(_store(_service(type="kafka")))

    validator.validate(entity_id=10, action=ValidationAction.DELETE)
    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=11, action=ValidationAction.DELETE)

    assert [(f.field_name, f.condition) for f in excinfo.value.failures] == [
        ("id", FailureCondition.NOT_FOUND)
    ]
