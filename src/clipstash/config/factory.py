# region Docstring
"""
clipstash.config.factory
Base settings class for clipstash and the cached settings factory.
Overview:
- FactoryBaseSettings layers the optional files in the config directory under the
    CLIPSTASH_* environment variables, so every settings class can be tuned without
    code changes.
- The config directory and environment are resolved each time a settings class is
    built, so XDG_CONFIG_HOME and CLIPSTASH_ENV changes are honoured (tests rely on it).
Contents:
- Constants:
    - T: TypeVar bound to BaseSettings for generic typing support in the factory function.
- Classes:
    - FactoryBaseSettings:
        Configuration Priority (highest to lowest):
            1. Environment variables (CLIPSTASH_*)
            2. <config_dir>/.env
            3. <config_dir>/config.{env}.yaml
            4. <config_dir>/config.yaml
            5. Init kwargs / field defaults
- Functions:
    - get_settings(settings_cls: Type[T]) -> T:
        LRU-cached factory so config files are only read once per settings class.
"""
# endregion
# region Imports
from functools import lru_cache
from typing import Type, TypeVar

from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .base import AppEnv

# endregion
# region FactoryBaseSettings Class
T = TypeVar("T", bound=BaseSettings)


class FactoryBaseSettings(BaseSettings):
    """
    BaseSettings reading CLIPSTASH_* variables over the files in the config directory.
    Priority: Env Vars > .env > config.{env}.yaml > config.yaml > Defaults
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        config_dir = AppEnv.config_dir()
        dotenv = DotEnvSettingsSource(
            settings_cls,
            env_file=config_dir / ".env",
            env_file_encoding="utf-8",
        )
        yaml_settings = YamlConfigSettingsSource(
            settings_cls,
            yaml_file=[
                config_dir / "config.yaml",
                config_dir / f"config.{AppEnv.environment()}.yaml",
            ],
        )
        return (
            env_settings,  # Environment variables (highest priority)
            dotenv,  # .env file
            yaml_settings,  # YAML files, later files win
            init_settings,  # Init kwargs
        )


# endregion
# region get_settings Factory Function


@lru_cache
def get_settings(settings_cls: Type[T]) -> T:
    """
    Factory function to load any settings class.
    Results are cached so we don't re-read files every time.
    """
    return settings_cls()


# endregion
