"""Concrete validators for policies, services and service definitions."""

from __future__ import annotations

import re
from collections.abc import Callable

from services.action.policy_validation.domain import (
    Policy,
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.failures import (
    FailureCollector,
    ValidationFailureDetail,
    ValidationFailureDetailBuilder,
)
from services.action.policy_validation.normalization import (
    access_type_names,
    all_resource_names,
    enum_default_index,
    implied_grants,
    is_audit_enabled,
    is_blank,
    lower_cased_resource_map,
    mandatory_resource_names,
    policy_resource_names,
    required_config_names,
    service_config_names,
    validation_patterns,
)
from services.action.policy_validation.service import Validator


class PolicyValidator(Validator[Policy]):
    """Checks a policy against the definition of the service it targets."""

    def check_rules(
        self, entity_id: int, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        policy = self._index.get_policy(entity_id)
        if policy is None:
            failures.add(_not_found("id", f"no policy found for id[{entity_id}]"))
            return False
        if action is ValidationAction.DELETE:
            return True
        return self._check_policy(policy, action, failures)

    def check_candidate(
        self, candidate: Policy, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        known = _candidate_identity_valid(
            kind="policy",
            candidate_id=candidate.id,
            action=action,
            lookup=self._index.get_policy,
            failures=failures,
        )
        if action is ValidationAction.DELETE:
            return known
        valid = self._check_policy(candidate, action, failures)
        return known and valid

    def audit_enabled(self, *, policy_id: int) -> bool:
        """Return the effective audit flag of a stored policy."""
        return is_audit_enabled(self._index.get_policy(policy_id))

    def _check_policy(
        self, policy: Policy, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        valid = True
        if is_blank(policy.name):
            failures.add(_missing("name", "policy name is required"))
            valid = False

        if is_blank(policy.service):
            failures.add(_missing("service", "policy service is required"))
            return False

        if not is_blank(policy.name):
            duplicates = [
                other
                for other in self._index.list_policies(policy.name, policy.service)
                if other.id != policy.id
            ]
            if duplicates:
                failures.add(
                    _invalid(
                        "name",
                        f"policy name[{policy.name}] already used in "
                        f"service[{policy.service}] by id[{duplicates[0].id}]",
                    )
                )
                valid = False

        service = self._index.get_service_by_name(policy.service)
        if service is None:
            failures.add(
                _not_found("service", f"no service found with name[{policy.service}]")
            )
            return False
        service_def = self._index.get_service_definition_by_name(service.type)
        if service_def is None:
            failures.add(
                _not_found(
                    "service_def",
                    f"no service definition found with name[{service.type}]",
                )
            )
            return False

        resources_valid = self._check_resources(policy, service_def, action, failures)
        accesses_valid = self._check_accesses(policy, service_def, failures)
        return valid and resources_valid and accesses_valid

    def _check_resources(
        self,
        policy: Policy,
        service_def: ServiceDefinition,
        action: ValidationAction,
        failures: FailureCollector,
    ) -> bool:
        valid = True
        if action is not ValidationAction.DELETE:
            missing = mandatory_resource_names(service_def) - policy_resource_names(
                policy
            )
            for name in sorted(missing):
                failures.add(
                    _missing("resources", "missing mandatory resource", sub_field=name)
                )
                valid = False

        resources = lower_cased_resource_map(policy.resources) or {}
        for name in sorted(set(resources) - all_resource_names(service_def)):
            failures.add(
                _invalid(
                    "resources",
                    f"resource type not defined by service definition[{service_def.name}]",
                    sub_field=name,
                )
            )
            valid = False

        for name, pattern in validation_patterns(service_def).items():
            resource = resources.get(name.lower())
            if resource is None:
                continue
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                failures.add(
                    _internal(
                        "resources",
                        f"invalid validation pattern[{pattern}]: {exc}",
                        sub_field=name,
                    )
                )
                valid = False
                continue
            for value in resource.values:
                if compiled.fullmatch(value) is None:
                    failures.add(
                        _invalid(
                            "resources",
                            f"value[{value}] does not match pattern[{pattern}]",
                            sub_field=name,
                        )
                    )
                    valid = False
        return valid

    def _check_accesses(
        self,
        policy: Policy,
        service_def: ServiceDefinition,
        failures: FailureCollector,
    ) -> bool:
        declared = access_type_names(service_def)
        valid = True
        for item in policy.policy_items:
            for access in item.accesses:
                if access.type.lower() in declared:
                    continue
                failures.add(
                    _invalid(
                        "policy_items",
                        f"access type not defined by service definition[{service_def.name}]",
                        sub_field=access.type,
                    )
                )
                valid = False
        return valid


class ServiceValidator(Validator[Service]):
    """Checks a service registration against its service definition."""

    def check_rules(
        self, entity_id: int, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        service = self._index.get_service(entity_id)
        if service is None:
            failures.add(_not_found("id", f"no service found for id[{entity_id}]"))
            return False
        if action is ValidationAction.DELETE:
            return True
        return self._check_service(service, failures)

    def check_candidate(
        self, candidate: Service, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        known = _candidate_identity_valid(
            kind="service",
            candidate_id=candidate.id,
            action=action,
            lookup=self._index.get_service,
            failures=failures,
        )
        if action is ValidationAction.DELETE:
            return known
        valid = self._check_service(candidate, failures)
        return known and valid

    def _check_service(self, service: Service, failures: FailureCollector) -> bool:
        valid = True
        if is_blank(service.name):
            failures.add(_missing("name", "service name is required"))
            valid = False
        else:
            existing = self._index.get_service_by_name(service.name)
            if existing is not None and existing.id != service.id:
                failures.add(
                    _invalid(
                        "name",
                        f"service name[{service.name}] already used by id[{existing.id}]",
                    )
                )
                valid = False

        if is_blank(service.type):
            failures.add(_missing("type", "service type is required"))
            return False
        service_def = self._index.get_service_definition_by_name(service.type)
        if service_def is None:
            failures.add(
                _not_found("type", f"no service definition found with name[{service.type}]")
            )
            return False

        missing = required_config_names(service_def) - service_config_names(service)
        for name in sorted(missing):
            failures.add(
                _missing("configs", "missing mandatory config parameter", sub_field=name)
            )
            valid = False
        return valid


class ServiceDefinitionValidator(Validator[ServiceDefinition]):
    """Checks the internal consistency of a service definition."""

    def check_rules(
        self, entity_id: int, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        service_def = self._index.get_service_definition(entity_id)
        if service_def is None:
            failures.add(
                _not_found("id", f"no service definition found for id[{entity_id}]")
            )
            return False
        if action is ValidationAction.DELETE:
            return True
        return self._check_definition(service_def, failures)

    def check_candidate(
        self,
        candidate: ServiceDefinition,
        action: ValidationAction,
        failures: FailureCollector,
    ) -> bool:
        known = _candidate_identity_valid(
            kind="service definition",
            candidate_id=candidate.id,
            action=action,
            lookup=self._index.get_service_definition,
            failures=failures,
        )
        if action is ValidationAction.DELETE:
            return known
        valid = self._check_definition(candidate, failures)
        return known and valid

    def _check_definition(
        self, service_def: ServiceDefinition, failures: FailureCollector
    ) -> bool:
        valid = True
        if is_blank(service_def.name):
            failures.add(_missing("name", "service definition name is required"))
            valid = False
        else:
            existing = self._index.get_service_definition_by_name(service_def.name)
            if existing is not None and existing.id != service_def.id:
                failures.add(
                    _invalid(
                        "name",
                        f"service definition name[{service_def.name}] already used "
                        f"by id[{existing.id}]",
                    )
                )
                valid = False

        checks = (
            self._check_resource_defs(service_def, failures),
            self._check_access_type_defs(service_def, failures),
            self._check_enum_defs(service_def, failures),
            self._check_config_defs(service_def, failures),
        )
        return valid and all(checks)

    def _check_resource_defs(
        self, service_def: ServiceDefinition, failures: FailureCollector
    ) -> bool:
        valid = True
        seen: set[str] = set()
        for resource_def in service_def.resources or ():
            if is_blank(resource_def.name):
                failures.add(_missing("resources", "resource name is required"))
                valid = False
                continue
            name = resource_def.name.lower()
            if name in seen:
                failures.add(
                    _invalid("resources", "duplicate resource name", sub_field=name)
                )
                valid = False
            seen.add(name)
            if is_blank(resource_def.validation_pattern):
                continue
            try:
                re.compile(resource_def.validation_pattern)
            except re.error as exc:
                failures.add(
                    _invalid(
                        "resources",
                        f"invalid validation pattern[{resource_def.validation_pattern}]: {exc}",
                        sub_field=resource_def.name,
                    )
                )
                valid = False
        return valid

    def _check_access_type_defs(
        self, service_def: ServiceDefinition, failures: FailureCollector
    ) -> bool:
        valid = True
        declared = access_type_names(service_def)
        seen: set[str] = set()
        for access_type_def in service_def.access_types or ():
            if is_blank(access_type_def.name):
                failures.add(_missing("access_types", "access type name is required"))
                valid = False
                continue
            name = access_type_def.name.lower()
            if name in seen:
                failures.add(
                    _invalid("access_types", "duplicate access type name", sub_field=name)
                )
                valid = False
            seen.add(name)
            for grant in implied_grants(access_type_def) or ():
                if is_blank(grant):
                    failures.add(
                        _invalid(
                            "access_types",
                            "implied grant name is blank",
                            sub_field=name,
                        )
                    )
                    valid = False
                elif grant not in declared:
                    failures.add(
                        _invalid(
                            "access_types",
                            f"implied grant[{grant}] is not a defined access type",
                            sub_field=name,
                        )
                    )
                    valid = False
        return valid

    def _check_enum_defs(
        self, service_def: ServiceDefinition, failures: FailureCollector
    ) -> bool:
        valid = True
        for enum_def in service_def.enums or ():
            if is_blank(enum_def.name):
                failures.add(_missing("enums", "enum name is required"))
                valid = False
                continue
            if not enum_def.elements:
                failures.add(
                    _missing("enums", "enum has no elements", sub_field=enum_def.name)
                )
                valid = False
                continue
            default_index = enum_default_index(enum_def)
            if not 0 <= default_index < len(enum_def.elements):
                failures.add(
                    _invalid(
                        "enums",
                        f"default index[{default_index}] is out of range",
                        sub_field=enum_def.name,
                    )
                )
                valid = False
        return valid

    def _check_config_defs(
        self, service_def: ServiceDefinition, failures: FailureCollector
    ) -> bool:
        valid = True
        seen: set[str] = set()
        for config_def in service_def.configs or ():
            if is_blank(config_def.name):
                failures.add(_missing("configs", "config name is required"))
                valid = False
                continue
            if config_def.name in seen:
                failures.add(
                    _invalid(
                        "configs", "duplicate config name", sub_field=config_def.name
                    )
                )
                valid = False
            seen.add(config_def.name)
        return valid


def _candidate_identity_valid(
    *,
    kind: str,
    candidate_id: int | None,
    action: ValidationAction,
    lookup: Callable[[int], object | None],
    failures: FailureCollector,
) -> bool:
    """UPDATE and DELETE candidates must name an entity that already exists."""
    if action is ValidationAction.CREATE:
        return True
    if candidate_id is None:
        failures.add(_missing("id", f"{kind} id is required for {action.value}"))
        return False
    if lookup(candidate_id) is None:
        failures.add(_not_found("id", f"no {kind} found for id[{candidate_id}]"))
        return False
    return True


def _missing(
    field: str, reason: str, *, sub_field: str | None = None
) -> ValidationFailureDetail:
    return (
        ValidationFailureDetailBuilder()
        .field(field)
        .sub_field(sub_field)
        .is_missing()
        .because_of(reason)
        .build()
    )


def _invalid(
    field: str, reason: str, *, sub_field: str | None = None
) -> ValidationFailureDetail:
    return (
        ValidationFailureDetailBuilder()
        .field(field)
        .sub_field(sub_field)
        .is_invalid_value()
        .because_of(reason)
        .build()
    )


def _not_found(field: str, reason: str) -> ValidationFailureDetail:
    return (
        ValidationFailureDetailBuilder()
        .field(field)
        .is_not_found()
        .because_of(reason)
        .build()
    )


def _internal(
    field: str, reason: str, *, sub_field: str | None = None
) -> ValidationFailureDetail:
    return (
        ValidationFailureDetailBuilder()
        .field(field)
        .sub_field(sub_field)
        .is_an_internal_error()
        .because_of(reason)
        .build()
    )
