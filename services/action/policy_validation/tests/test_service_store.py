"""Tests for the in-memory and SQLite-backed service stores."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine, insert

from services.action.policy_validation.config import PolicyValidationSettings
from services.action.policy_validation.data.repository import (
    InMemoryServiceStore,
    SqlServiceStore,
)
from services.action.policy_validation.data.runtime import PolicyValidationSqlRuntime
from services.action.policy_validation.data.schema import policies
from services.action.policy_validation.domain import (
    Policy,
    PolicyResource,
    ResourceDef,
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.implementation import PolicyValidator
from services.action.policy_validation.interfaces import PolicySearchFilter
from services.action.policy_validation.metadata_index import MetadataIndex
from services.action.policy_validation.service import ValidationFailedError


def _runtime(tmp_path: Path) -> PolicyValidationSqlRuntime:
    return PolicyValidationSqlRuntime.from_settings(
        PolicyValidationSettings(
            store_url=f"sqlite:///{tmp_path / 'store.db'}",
            create_schema=True,
        )
    )


def _seed(store: InMemoryServiceStore | SqlServiceStore) -> None:
    store.put_service_definition(
        ServiceDefinition(
            id=1,
            name="hive",
            resources=(ResourceDef(name="database", mandatory=True),),
        )
    )
    store.put_service(Service(id=10, name="hive_prod", type="hive"))
    store.put_policy(
        Policy(
            id=100,
            name="finance",
            service="hive_prod",
            resources={"database": PolicyResource(values=("finance",))},
        )
    )
    store.put_policy(Policy(id=101, name="hr", service="hive_prod"))
    store.put_policy(Policy(id=102, name="finance", service="hive_dev"))


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return InMemoryServiceStore()
    return SqlServiceStore(_runtime(tmp_path))


def test_store_round_trips_entities(store) -> None:
    _seed(store)

    assert store.get_service_definition(service_def_id=1).name == "hive"
    assert store.get_service_definition_by_name(name="hive").id == 1
    assert store.get_service(service_id=10).type == "hive"
    assert store.get_service_by_name(name="hive_prod").id == 10
    policy = store.get_policy(policy_id=100)
    assert policy.resources["database"].values == ("finance",)
    assert store.get_policy(policy_id=404) is None
    assert store.get_service_by_name(name="missing") is None


def test_store_lists_policies_with_exact_filters(store) -> None:
    _seed(store)

    def ids(**filters: str) -> list[int]:
        listed = store.list_policies(search_filter=PolicySearchFilter(**filters))
        return [policy.id for policy in listed]

    assert ids() == [100, 101, 102]
    assert ids(policy_name="finance") == [100, 102]
    assert ids(service_name="hive_prod") == [100, 101]
    assert ids(policy_name="finance", service_name="hive_dev") == [102]
    assert ids(policy_name="FINANCE") == []


def test_store_put_replaces_and_delete_removes(store) -> None:
    _seed(store)

    store.put_policy(Policy(id=101, name="hr-renamed", service="hive_prod"))
    store.delete_policy(policy_id=102)

    assert store.get_policy(policy_id=101).name == "hr-renamed"
    assert store.get_policy(policy_id=102) is None


def test_store_rejects_entities_without_id(store) -> None:
    with pytest.raises(ValueError, match="id is required"):
        store.put_policy(Policy(name="no-id"))


def test_validators_run_over_sql_store(tmp_path: Path) -> None:
    store = SqlServiceStore(_runtime(tmp_path))
    _seed(store)
    validator = PolicyValidator(index=MetadataIndex(store))

    validator.validate(entity_id=100, action=ValidationAction.UPDATE)
    with pytest.raises(ValidationFailedError) as excinfo:
        validator.validate(entity_id=101, action=ValidationAction.UPDATE)

    assert [f.sub_field_name for f in excinfo.value.failures] == ["database"]


def test_undecodable_document_raises_validation_error(tmp_path: Path) -> None:
    runtime = _runtime(tmp_path)
    with runtime.session() as session:
        session.execute(
            insert(policies).values(
                id=7, name="bad", service_name="hive_prod", document="{not json"
            )
        )
    store = SqlServiceStore(runtime)

    with pytest.raises(ValidationError):
        store.get_policy(policy_id=7)
    assert MetadataIndex(store).get_policy(7) is None


def test_unreachable_database_surfaces_as_connection_error(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'store.db'}")
    store = SqlServiceStore(PolicyValidationSqlRuntime.from_engine(engine))

    with pytest.raises(ConnectionError):
        store.get_service(service_id=1)
    assert MetadataIndex(store).get_service(1) is None


def test_runtime_requires_store_url() -> None:
    with pytest.raises(ValueError, match="store_url"):
        PolicyValidationSqlRuntime.from_settings(PolicyValidationSettings())
