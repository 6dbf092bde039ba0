"""Typed settings tree shared by every Warden component."""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "warden" / "warden.yaml"
ENV_PREFIX = "WARDEN_"

_COMPONENT_KINDS = ("service",)


class LoggingSettings(BaseModel):
    """Root logger level, output format and the fields bound to every record."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "warden"
    environment: str = "dev"


class ComponentsSettings(BaseModel):
    """Raw ``components.<kind>.<name>`` blocks.

    Blocks stay untyped here; each component validates its own block with
    ``resolve_component_settings``.
    """

    model_config = ConfigDict(extra="forbid")

    service: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _reject_flat_component_keys(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        for key in value:
            kind, separator, name = str(key).partition("_")
            if separator and kind in _COMPONENT_KINDS:
                raise ValueError(
                    f"components.{key} is invalid; use components.{kind}.{name} instead"
                )
        return value


class WardenSettings(BaseSettings):
    """Root settings.

    Constructed directly, sources apply as init arguments over ``WARDEN_``
    environment variables over the YAML file at ``DEFAULT_CONFIG_PATH``.
    ``load_settings`` applies the same order over explicit inputs.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    _config_path: ClassVar[Path] = DEFAULT_CONFIG_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(
                settings_cls, yaml_file=cls._config_path, yaml_file_encoding="utf-8"
            ),
        )


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: WardenSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Validate the block for ``<kind>_<name>`` found at ``components.<kind>.<name>``.

    A component without a block gets the model's defaults.
    """
    kind, separator, name = component_id.partition("_")
    if not separator or kind not in _COMPONENT_KINDS:
        raise ValueError(f"unknown component kind in id: {component_id}")
    namespace: dict[str, dict[str, Any]] = getattr(settings.components, kind)
    return model.model_validate(namespace.get(name, {}))
