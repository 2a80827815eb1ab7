from __future__ import annotations

from inspect import getmro, isclass
from typing import TYPE_CHECKING, Any, cast

import monkay
import sqlalchemy
from faker import Faker

from sqlfactories.conf import settings
from sqlfactories.core.terminal import Print
from sqlfactories.exceptions import FactoryDefinitionError, InvalidModelError

from .fields import AssociationField, FactoryField

if TYPE_CHECKING:
    from .base import Factory
    from .types import ValidationMode

terminal = Print()

# Public API of `Factory`; fields may not shadow these names.
FACTORY_API_NAMES = frozenset(
    ["meta", "insert", "build_row", "clone", "set", "values", "id_for_model", "get"]
)


# this is not a table or model meta
class MetaInfo:
    """
    Stores metadata for a `Factory` class.

    Attributes:
        model (Any): Class the inserted rows are hydrated into.
        table (sqlalchemy.Table | None): Table the factory inserts into.
        id_field (str | None): Identifier attribute of `model`. `None` falls
            back to `settings.id_field`.
        fields (dict[str, FactoryField]): Fields in declaration order,
            inherited fields first.
        faker (Faker | None): Faker instance of the factory class.
        abstract (bool): Abstract factories only carry shared fields.
    """

    __slots__ = ("model", "table", "id_field", "fields", "faker", "abstract")

    def __init__(self, meta: Any = None, **kwargs: Any) -> None:
        self.model: Any = None
        self.table: sqlalchemy.Table | None = None
        self.id_field: str | None = None
        self.fields: dict[str, FactoryField] = {}
        self.faker: Faker | None = None
        self.abstract: bool = False
        for slot in self.__slots__:
            value = getattr(meta, slot, None)
            if value is not None:
                setattr(self, slot, value)
        for name, value in kwargs.items():
            setattr(self, name, value)


def _make_setter(name: str, factory_name: str) -> Any:
    def setter(self: Factory, value: Any) -> Factory:
        return self.set(**{name: value})

    setter.__name__ = name
    setter.__qualname__ = f"{factory_name}.{name}"
    setter.__doc__ = f'Returns a copy of the factory with "{name}" replaced.'
    return setter


def _uncovered_columns(table: sqlalchemy.Table, fields: dict[str, FactoryField]) -> list[str]:
    covered = {field.get_column() for field in fields.values()}
    autoincrement_column = table.autoincrement_column
    return [
        column.key
        for column in table.columns
        if column.key not in covered
        and not column.nullable
        and column.default is None
        and column.server_default is None
        and column is not autoincrement_column
    ]


class FactoryMeta(type):
    """
    Metaclass for `Factory` classes.

    It collects the fields of a factory (inherited ones first), binds the
    model and table named in the inner `Meta` class, checks the fields against
    the table columns and generates one fluent setter per field, so that
    `CityFactory().name("Amsterdam").country(netherlands)` works.

    Plain class attributes named after a table column are static defaults.
    """

    def __new__(
        cls,
        factory_name: str,
        bases: tuple[type, ...],
        attrs: dict[str, Any],
        meta_info_class: type[MetaInfo] = MetaInfo,
        validation: ValidationMode | None = None,
        **kwargs: Any,
    ) -> type[Factory]:
        """
        Creates a new `Factory` class.

        Parameters:
            validation (Literal["none", "warn", "error"] | None, optional):
                What to do about NOT NULL columns without default that no
                field covers. `None` uses `settings.factory_validation`.

        Raises:
            InvalidModelError: If a concrete factory names no model or table,
                or they cannot be used.
            FactoryDefinitionError: If fields clash with the factory API or
                have no matching column.
        """
        if not any(True for parent in bases if isinstance(parent, FactoryMeta)):
            attrs.setdefault("meta", meta_info_class(abstract=True))
            return cast("type[Factory]", super().__new__(cls, factory_name, bases, attrs, **kwargs))

        meta_class: Any = attrs.pop("Meta", None)
        abstract: bool = getattr(meta_class, "abstract", False)
        fields: dict[str, FactoryField] = {}
        parent_meta: MetaInfo | None = None

        # Inherit fields, the nearest definition wins.
        for base in bases:
            for sub in getmro(base):
                meta: Any = getattr(sub, "meta", None)
                if isinstance(meta, MetaInfo):
                    if parent_meta is None and not meta.abstract:
                        parent_meta = meta
                    for name, field in meta.fields.items():
                        fields.setdefault(name, field.__copy__())

        db_model: Any = getattr(meta_class, "model", None)
        table: Any = getattr(meta_class, "table", None)
        id_field: str | None = getattr(meta_class, "id_field", None)
        if parent_meta is not None:
            db_model = db_model or parent_meta.model
            table = table if table is not None else parent_meta.table
            id_field = id_field or parent_meta.id_field

        if isinstance(db_model, str):
            db_model = monkay.load(db_model)
        if isinstance(table, str):
            table = monkay.load(table)

        if not abstract:
            if db_model is None:
                raise InvalidModelError(f'Model is required for factory "{factory_name}".')
            if not isclass(db_model):
                raise InvalidModelError(
                    f"{type(db_model).__name__} instance given as model of "
                    f'"{factory_name}", a class is required.'
                )
            if table is None:
                raise InvalidModelError(f'Table is required for factory "{factory_name}".')
            if not isinstance(table, sqlalchemy.Table):
                raise InvalidModelError(
                    f'Table of "{factory_name}" must be a sqlalchemy.Table, '
                    f"got {type(table).__name__}."
                )

        for key in list(attrs.keys()):
            value = attrs[key]
            if isinstance(value, FactoryField):
                del attrs[key]
                value.name = key
                if value.exclude:
                    fields.pop(key, None)
                else:
                    fields[key] = value
            elif table is not None and key in table.columns and not key.startswith("_"):
                del attrs[key]
                field = FactoryField(default=value)
                field.name = key
                fields[key] = field

        for name in fields:
            if name in FACTORY_API_NAMES or name.startswith("_"):
                raise FactoryDefinitionError(
                    f'Field name "{name}" of "{factory_name}" clashes with the factory API.'
                )

        if table is not None:
            for field in fields.values():
                if field.get_column() not in table.columns:
                    raise FactoryDefinitionError(
                        f'Field "{field.name}" of "{factory_name}" has no column '
                        f'"{field.get_column()}" in table "{table.name}".'
                    )

        faker = Faker(settings.faker_locale)
        if settings.faker_seed is not None:
            faker.seed_instance(settings.faker_seed)

        attrs["meta"] = meta_info_class(
            model=db_model,
            table=table,
            id_field=id_field,
            fields=fields,
            faker=faker,
            abstract=abstract,
        )
        for name in fields:
            attrs[name] = _make_setter(name, factory_name)

        new_class = cast(
            "type[Factory]", super().__new__(cls, factory_name, bases, attrs, **kwargs)
        )
        for field in fields.values():
            field.owner = new_class

        if validation is None:
            validation = settings.factory_validation
        if table is not None and not abstract and validation != "none":
            uncovered = _uncovered_columns(table, fields)
            if uncovered:
                message = (
                    f'"{factory_name}" leaves required columns of "{table.name}" '
                    f"without value: {', '.join(uncovered)}."
                )
                if validation == "error":
                    raise FactoryDefinitionError(message)
                terminal.write_warning(message)
        return new_class


__all__ = ["FACTORY_API_NAMES", "FactoryMeta", "MetaInfo"]
