"""Tests for Policy Validation settings resolution and component wiring."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from packages.warden_shared.config import load_settings
from services.action.policy_validation.component import (
    STORE_COMPONENT_KEY,
    build_component,
)
from services.action.policy_validation.config import (
    PolicyValidationSettings,
    resolve_policy_validation_settings,
)
from services.action.policy_validation.data.repository import (
    InMemoryServiceStore,
    SqlServiceStore,
)
from services.action.policy_validation.domain import (
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.service import ValidationFailedError


def test_settings_resolve_from_grouped_service_namespace(tmp_path: Path) -> None:
    """Env should override YAML for the grouped service settings block."""
    config_file = tmp_path / "warden.yaml"
    config_file.write_text(
        "\n".join(
            [
                "components:",
                "  service:",
                "    policy_validation:",
                "      failure_delimiter: '|'",
                "      store_failure_log_level: INFO",
            ]
        ),
        encoding="utf-8",
    )

    settings = load_settings(
        config_path=config_file,
        environ={
            "WARDEN_COMPONENTS__SERVICE__POLICY_VALIDATION__STORE_FAILURE_LOG_LEVEL": (
                "WARNING"
            )
        },
    )
    resolved = resolve_policy_validation_settings(settings)

    assert resolved.failure_delimiter == "|"
    assert resolved.store_failure_log_level == "WARNING"
    assert resolved.store_url is None


def test_settings_defaults_apply_when_block_absent(tmp_path: Path) -> None:
    settings = load_settings(config_path=tmp_path / "absent.yaml", environ={})

    assert resolve_policy_validation_settings(settings) == PolicyValidationSettings()


def test_settings_reject_empty_delimiter_and_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        PolicyValidationSettings(failure_delimiter="")
    with pytest.raises(ValidationError):
        PolicyValidationSettings.model_validate({"delimiter": ","})


def test_build_component_prefers_supplied_store(tmp_path: Path) -> None:
    store = InMemoryServiceStore(
        service_definitions=(ServiceDefinition(id=1, name="hive"),),
        services=(Service(id=10, name="hive_prod", type="hive"),),
    )
    settings = load_settings(config_path=tmp_path / "absent.yaml", environ={})

    validators = build_component(
        settings=settings, components={STORE_COMPONENT_KEY: store}
    )

    validators.service.validate(entity_id=10, action=ValidationAction.UPDATE)


def test_build_component_defaults_to_empty_in_memory_store(tmp_path: Path) -> None:
    settings = load_settings(config_path=tmp_path / "absent.yaml", environ={})

    validators = build_component(settings=settings, components={})

    with pytest.raises(ValidationFailedError):
        validators.service.validate(entity_id=10, action=ValidationAction.UPDATE)


def test_build_component_uses_sql_store_when_url_configured(tmp_path: Path) -> None:
    settings = load_settings(
        config_path=tmp_path / "absent.yaml",
        environ={},
        cli_params={
            "components": {
                "service": {
                    "policy_validation": {
                        "store_url": f"sqlite:///{tmp_path / 'store.db'}",
                        "create_schema": True,
                    }
                }
            }
        },
    )

    validators = build_component(settings=settings, components={})

    store = validators.policy._index._store
    assert isinstance(store, SqlServiceStore)
    store.put_service_definition(ServiceDefinition(id=1, name="hive"))
    store.put_service(Service(id=10, name="hive_prod", type="hive"))
    validators.service.validate(entity_id=10, action=ValidationAction.CREATE)
