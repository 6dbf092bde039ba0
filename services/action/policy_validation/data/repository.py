"""Service store implementations consumed through ``MetadataIndex``."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel
from sqlalchemy import Table, delete, insert, select
from sqlalchemy.exc import OperationalError

from services.action.policy_validation.data.runtime import PolicyValidationSqlRuntime
from services.action.policy_validation.data.schema import (
    policies,
    service_definitions,
    services,
)
from services.action.policy_validation.domain import (
    Policy,
    Service,
    ServiceDefinition,
)
from services.action.policy_validation.interfaces import (
    PolicySearchFilter,
    ServiceStore,
)


class InMemoryServiceStore(ServiceStore):
    """Dict-backed store keyed by entity id."""

    def __init__(
        self,
        *,
        service_definitions: tuple[ServiceDefinition, ...] = (),
        services: tuple[Service, ...] = (),
        policies: tuple[Policy, ...] = (),
    ) -> None:
        self._service_definitions: dict[int, ServiceDefinition] = {}
        self._services: dict[int, Service] = {}
        self._policies: dict[int, Policy] = {}
        for service_def in service_definitions:
            self.put_service_definition(service_def)
        for service in services:
            self.put_service(service)
        for policy in policies:
            self.put_policy(policy)

    def put_service_definition(self, service_def: ServiceDefinition) -> None:
        self._service_definitions[_require_id(service_def)] = service_def

    def put_service(self, service: Service) -> None:
        self._services[_require_id(service)] = service

    def put_policy(self, policy: Policy) -> None:
        self._policies[_require_id(policy)] = policy

    def delete_policy(self, *, policy_id: int) -> None:
        self._policies.pop(policy_id, None)

    def get_service_definition(
        self, *, service_def_id: int
    ) -> ServiceDefinition | None:
        return self._service_definitions.get(service_def_id)

    def get_service_definition_by_name(self, *, name: str) -> ServiceDefinition | None:
        for service_def in self._service_definitions.values():
            if service_def.name == name:
                return service_def
        return None

    def get_service(self, *, service_id: int) -> Service | None:
        return self._services.get(service_id)

    def get_service_by_name(self, *, name: str) -> Service | None:
        for service in self._services.values():
            if service.name == name:
                return service
        return None

    def get_policy(self, *, policy_id: int) -> Policy | None:
        return self._policies.get(policy_id)

    def list_policies(self, *, search_filter: PolicySearchFilter) -> tuple[Policy, ...]:
        return tuple(
            policy
            for policy in self._policies.values()
            if (
                search_filter.policy_name is None
                or policy.name == search_filter.policy_name
            )
            and (
                search_filter.service_name is None
                or policy.service == search_filter.service_name
            )
        )


class SqlServiceStore(ServiceStore):
    """SQLAlchemy Core store holding each entity as a JSON document.

    Lookup columns (name, type, service name) are denormalized from the
    document so filters run in SQL. Connectivity failures surface as
    ``ConnectionError``; documents that no longer decode raise pydantic's
    ``ValidationError``.
    """

    def __init__(self, runtime: PolicyValidationSqlRuntime) -> None:
        self._runtime = runtime

    def put_service_definition(self, service_def: ServiceDefinition) -> None:
        self._replace(
            service_definitions,
            _require_id(service_def),
            name=_require_name(service_def.name),
            document=service_def.model_dump_json(),
        )

    def put_service(self, service: Service) -> None:
        self._replace(
            services,
            _require_id(service),
            name=_require_name(service.name),
            type=service.type or "",
            document=service.model_dump_json(),
        )

    def put_policy(self, policy: Policy) -> None:
        self._replace(
            policies,
            _require_id(policy),
            name=policy.name or "",
            service_name=policy.service or "",
            document=policy.model_dump_json(),
        )

    def delete_policy(self, *, policy_id: int) -> None:
        with self._session() as session:
            session.execute(delete(policies).where(policies.c.id == policy_id))

    def get_service_definition(
        self, *, service_def_id: int
    ) -> ServiceDefinition | None:
        return self._fetch_one(
            service_definitions,
            service_definitions.c.id == service_def_id,
            ServiceDefinition,
        )

    def get_service_definition_by_name(self, *, name: str) -> ServiceDefinition | None:
        return self._fetch_one(
            service_definitions,
            service_definitions.c.name == name,
            ServiceDefinition,
        )

    def get_service(self, *, service_id: int) -> Service | None:
        return self._fetch_one(services, services.c.id == service_id, Service)

    def get_service_by_name(self, *, name: str) -> Service | None:
        return self._fetch_one(services, services.c.name == name, Service)

    def get_policy(self, *, policy_id: int) -> Policy | None:
        return self._fetch_one(policies, policies.c.id == policy_id, Policy)

    def list_policies(self, *, search_filter: PolicySearchFilter) -> tuple[Policy, ...]:
        stmt = select(policies.c.document).order_by(policies.c.id)
        if search_filter.policy_name is not None:
            stmt = stmt.where(policies.c.name == search_filter.policy_name)
        if search_filter.service_name is not None:
            stmt = stmt.where(policies.c.service_name == search_filter.service_name)
        with self._session() as session:
            rows = session.execute(stmt).scalars().all()
        return tuple(Policy.model_validate_json(document) for document in rows)

    def _fetch_one(
        self,
        table: Table,
        clause: Any,
        model: type[BaseModel],
    ) -> Any:
        with self._session() as session:
            document = session.execute(
                select(table.c.document).where(clause)
            ).scalar_one_or_none()
        if document is None:
            return None
        return model.model_validate_json(document)

    def _replace(self, table: Table, entity_id: int, **values: Any) -> None:
        with self._session() as session:
            session.execute(delete(table).where(table.c.id == entity_id))
            session.execute(insert(table).values(id=entity_id, **values))

    @contextmanager
    def _session(self) -> Iterator[Any]:
        try:
            with self._runtime.session() as session:
                yield session
        except OperationalError as exc:
            raise ConnectionError("service store unavailable") from exc


def _require_id(entity: Policy | Service | ServiceDefinition) -> int:
    if entity.id is None:
        raise ValueError(f"{type(entity).__name__} id is required for storage")
    return entity.id


def _require_name(name: str | None) -> str:
    if not name:
        raise ValueError("name is required for storage")
    return name
