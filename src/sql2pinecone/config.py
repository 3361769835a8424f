"""Migration configuration.

Uses pydantic-settings.  Each field is bound to its environment variable
through an alias, but the environment is only read by
:meth:`MigrationConfig.from_env`; constructing a config directly uses the
given values and defaults alone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, ValidationError, ValidationInfo, model_validator
from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    EnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from sql2pinecone.db.dialect import async_url
from sql2pinecone.exceptions import ConfigurationError
from sql2pinecone.pipeline.batching import BATCH_SIZE
from sql2pinecone.search.providers.pinecone import DEFAULT_MODEL

if TYPE_CHECKING:
    from sqlalchemy.engine import URL

# Requirement groups checked by ``validate``.
REQUIRE_DATABASE = "database"
REQUIRE_VECTOR_STORE = "vector_store"


class MigrationConfig(BaseSettings):
    """Everything a migration run needs.

    Environment variables (read by :meth:`from_env`, also from ``.env``):
    ``SQL_DIALECT``, ``DB_CONNECTION_STRING``, ``SQLITE_DB_FILE``,
    ``PINECONE_API_KEY``, ``PINECONE_INDEX_NAME``, ``EMBEDDING_TEXT_FIELD``,
    ``EMBEDDING_MODEL``, ``BATCH_SIZE``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    dialect: str | None = Field(
        default=None,
        alias="SQL_DIALECT",
        description="postgresql, mysql, mssql, sqlite or an alias; None infers it from the URL",
    )
    connection_string: str = Field(
        default="",
        alias="DB_CONNECTION_STRING",
        description="SQLAlchemy-style database URL",
    )
    sqlite_file: str = Field(
        default=":memory:",
        alias="SQLITE_DB_FILE",
        description="SQLite database file used when no connection string is given",
    )
    pinecone_api_key: str = Field(default="", alias="PINECONE_API_KEY")
    index_name: str = Field(default="", alias="PINECONE_INDEX_NAME")
    embedding_text_field: str = Field(
        default="text",
        alias="EMBEDDING_TEXT_FIELD",
        description="Metadata key holding each row's embedded text",
    )
    embedding_model: str = Field(default=DEFAULT_MODEL, alias="EMBEDDING_MODEL")
    batch_size: int = Field(
        default=BATCH_SIZE,
        gt=0,
        alias="BATCH_SIZE",
        description="Records per embed/upsert flush",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Only explicit values; from_env reads the environment itself.
        return (init_settings,)

    @model_validator(mode="after")
    def check_required(self, info: ValidationInfo) -> MigrationConfig:
        required = (info.context or {}).get("require", ())
        if REQUIRE_VECTOR_STORE in required:
            if not self.pinecone_api_key:
                msg = "No Pinecone API key provided. Set PINECONE_API_KEY or pass an API key."
                raise ValueError(msg)
            if not self.index_name:
                msg = "No Pinecone index name provided."
                raise ValueError(msg)
        if required and not self.embedding_text_field:
            msg = "The embedding text field name must not be empty."
            raise ValueError(msg)
        if REQUIRE_DATABASE in required and not self.connection_string and not self.is_sqlite:
            msg = "No database connection string provided."
            raise ValueError(msg)
        return self

    @classmethod
    def create(cls, **values: Any) -> MigrationConfig:
        """Build a config from explicit values only.

        Raises:
            ConfigurationError: if a value is invalid (such as a non-positive batch size).
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise _configuration_error(e) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> MigrationConfig:
        """Build a config from ``.env`` and the environment.

        Environment variables win over ``.env``; keyword *overrides* that are
        not ``None`` win over both.

        Raises:
            ConfigurationError: if a value cannot be parsed.
        """
        values: dict[str, Any] = {}
        for source in (DotEnvSettingsSource(cls), EnvSettingsSource(cls)):
            values.update(_by_field_name(source()))
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.create(**values)

    def with_overrides(self, **overrides: Any) -> MigrationConfig:
        return self.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    @property
    def is_sqlite(self) -> bool:
        if self.dialect:
            return self.dialect.strip().lower() in ("sqlite", "sqlite3")
        return self.connection_string.startswith("sqlite")

    def validate(self, *, database: bool = True, vector_store: bool = True) -> MigrationConfig:
        """Raise :class:`ConfigurationError` if a required value is missing.

        *database* and *vector_store* select which collaborators will be
        built from this config; only their settings are required.
        """
        required = {
            name
            for name, wanted in ((REQUIRE_DATABASE, database), (REQUIRE_VECTOR_STORE, vector_store))
            if wanted
        }
        try:
            type(self).model_validate(self.model_dump(), context={"require": required})
        except ValidationError as e:
            raise _configuration_error(e) from e
        return self

    def connection_url(self) -> URL:
        """SQLAlchemy URL using the dialect's async driver."""
        dialect = self.dialect or ("sqlite" if not self.connection_string else None)
        return async_url(self.connection_string, dialect, sqlite_file=self.sqlite_file)


# Environment variable for each field.
ENV_VARS: dict[str, str] = {
    name: field.alias or name.upper() for name, field in MigrationConfig.model_fields.items()
}

_FIELD_KEYS: dict[str, str] = {
    key.lower(): name for name, var in ENV_VARS.items() for key in (name, var)
}


def _by_field_name(values: dict[str, Any]) -> dict[str, Any]:
    """Re-key settings-source output (aliases or field names) by field name."""
    return {_FIELD_KEYS[k.lower()]: v for k, v in values.items() if k.lower() in _FIELD_KEYS}


def _configuration_error(error: ValidationError) -> ConfigurationError:
    messages = []
    for detail in error.errors():
        msg = detail["msg"].removeprefix("Value error, ")
        if detail["loc"]:
            key = str(detail["loc"][0])
            name = _FIELD_KEYS.get(key.lower(), key)
            msg = f"{name} ({ENV_VARS.get(name, name)}): {msg}"
        messages.append(msg)
    return ConfigurationError("; ".join(messages))
