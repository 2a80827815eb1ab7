from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class FactorySettings(BaseSettings):
    """
    Settings for sqlfactories.

    The active settings class is selected with the `SQLFACTORIES_SETTINGS_MODULE`
    environment variable. Projects subclass `FactorySettings` and point the
    variable at the subclass, for example `tests.settings.TestSettings`.
    """

    model_config = SettingsConfigDict(extra="allow")

    id_field: str = "id"
    """
    Name of the identifier attribute read by `Factory.id_for_model` when a
    factory does not set `Meta.id_field`.
    """
    association_column_suffix: str = "_id"
    """
    Suffix appended to an association field name to get its foreign key
    column, `country` becomes `country_id`.
    """
    use_returning: bool = True
    """
    Use `INSERT ... RETURNING` when the dialect supports it. When disabled or
    unsupported, the inserted row is selected again by its primary key.
    """
    sequence_start: int = 0
    """
    Starting point of the process-wide sequence. The first value handed out
    is `sequence_start + 1`.
    """
    faker_locale: str | list[str] | None = None
    """Locale(s) passed to the Faker instance of every factory class."""
    faker_seed: int | None = None
    """When set, every factory Faker instance is seeded with this value."""
    max_association_depth: int = 32
    """
    Maximum nesting of default (pending) associations built for one factory.
    Guards against required self-referencing associations.
    """
    factory_validation: Literal["none", "warn", "error"] = "warn"
    """
    What to do when a factory leaves a NOT NULL column without default
    uncovered: nothing, print a warning or raise `FactoryDefinitionError`.
    """
