from __future__ import annotations

import copy
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, cast

from sqlfactories.conf import settings
from sqlfactories.core.insert import insert_record
from sqlfactories.core.sequence import current_sequence, get_default_sequence
from sqlfactories.exceptions import (
    FactoryDefinitionError,
    FactoryRecursionError,
    InvalidModelError,
)

from .association import Association
from .context_vars import factory_context_var
from .fields import AssociationField
from .metaclasses import FactoryMeta

if TYPE_CHECKING:
    from faker import Faker
    from sqlalchemy.engine import Connection

    from sqlfactories.core.sequence import Sequence

    from .metaclasses import MetaInfo
    from .types import FactoryContext


class FactoryContextImplementation(dict):
    """
    Runtime implementation of `FactoryContext`.

    A dict holding `faker`, `sequence` and `depth`. Attribute access falls
    through to the Faker instance so callbacks can write `context.email()`.
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(self["faker"], name)

    def copy(self) -> FactoryContextImplementation:
        return FactoryContextImplementation(self)


@contextmanager
def factory_context(
    *, faker: Faker | None = None, sequence: Sequence | None = None
) -> Generator[FactoryContext, None, None]:
    """
    Binds a Faker instance and/or a sequence for every factory constructed in
    the block, nested parent factories included. `sequence` is also used by
    bare `sequence()` calls made inside the block.

    ```python
    with factory_context(sequence=Sequence()):
        user = UserFactory().insert(connection)
    ```
    """
    if sequence is None:
        sequence = current_sequence.get() or get_default_sequence()
    # factories built directly in the block start at depth 0
    context = cast(
        "FactoryContext",
        FactoryContextImplementation(faker=faker, sequence=sequence, depth=-1),
    )
    token = factory_context_var.set(context)
    sequence_token = current_sequence.set(sequence)
    try:
        yield context
    finally:
        current_sequence.reset(sequence_token)
        factory_context_var.reset(token)


def _clone_value(value: Any) -> Any:
    if isinstance(value, Association):
        return value.clone()
    return copy.deepcopy(value)


class Factory(metaclass=FactoryMeta):
    """
    Base class for factories.

    A factory is a not-yet-inserted record together with everything needed to
    insert it. Subclasses name the model and the table in an inner `Meta`
    class and declare defaults:

    ```python
    class CityFactory(Factory):
        class Meta:
            model = City
            table = cities

        name = "Copenhagen"
        country = AssociationField(CountryFactory)


    city = CityFactory().name("Amsterdam").country(netherlands).insert(connection)
    ```

    Calling the class fills in the defaults; keyword arguments override them.
    Every field gets a setter returning an updated copy, the receiver is
    never changed. Associations accept a persisted parent record (shared, no
    new parent row) or a parent factory (inserted first).

    Attributes:
        meta (ClassVar[MetaInfo]): Model, table and fields of the factory.
    """

    meta: ClassVar[MetaInfo]
    __values__: dict[str, Any]

    def __init__(self, **kwargs: Any) -> None:
        """
        Builds the default values, then applies `kwargs`.

        Parameters:
            **kwargs (Any): Values for declared fields or any column of the
                table (an explicit `id` for instance).

        Raises:
            InvalidModelError: For abstract factories.
            FactoryRecursionError: If default associations nest deeper than
                `settings.max_association_depth`.
            FactoryDefinitionError: For unknown keywords.
        """
        if self.meta.abstract:
            raise InvalidModelError(
                f'"{type(self).__name__}" is abstract and cannot be instantiated.'
            )
        context = factory_context_var.get(None)
        if context is None:
            context = cast(
                "FactoryContext",
                FactoryContextImplementation(
                    faker=self.meta.faker,
                    sequence=current_sequence.get() or get_default_sequence(),
                    depth=0,
                ),
            )
        else:
            context = context.copy()
            context["depth"] += 1
            if context["depth"] > settings.max_association_depth:
                raise FactoryRecursionError(
                    f'Building "{type(self).__name__}" exceeded the maximum association '
                    f"depth of {settings.max_association_depth}.",
                    detail="Make self-referencing associations optional.",
                )
            if context["faker"] is None:
                context["faker"] = self.meta.faker

        self.__values__ = {}
        token = factory_context_var.set(context)
        try:
            for name, field in self.meta.fields.items():
                if name in kwargs:
                    self.__values__[name] = field.to_value(kwargs[name])
                else:
                    self.__values__[name] = field.get_default(context)
        finally:
            factory_context_var.reset(token)

        for name, value in kwargs.items():
            if name not in self.meta.fields:
                self._assign(name, value)

    def _assign(self, name: str, value: Any) -> None:
        field = self.meta.fields.get(name)
        if field is not None:
            self.__values__[name] = field.to_value(value)
            return
        association = self._association_for_column(name)
        if association is not None:
            # the foreign key replaces the association, no parent is inserted
            self.__values__[association.name] = association.from_id(value)
        elif name in self.meta.table.columns:
            self.__values__[name] = value
        else:
            raise FactoryDefinitionError(
                f'"{type(self).__name__}" has no field or column named "{name}".'
            )

    @classmethod
    def _association_for_column(cls, column: str) -> AssociationField | None:
        for field in cls.meta.fields.values():
            if isinstance(field, AssociationField) and field.get_column() == column:
                return field
        return None

    @property
    def values(self) -> Mapping[str, Any]:
        """Read-only view of the current field values."""
        return MappingProxyType(self.__values__)

    def __getitem__(self, name: str) -> Any:
        return self.__values__[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.__values__.get(name, default)

    def set(self, **values: Any) -> Factory:
        """
        Returns a copy of the factory with `values` replaced.

        The generated per-field setters call this method.
        """
        factory = self.clone()
        for name, value in values.items():
            factory._assign(name, value)
        return factory

    def clone(self) -> Factory:
        """
        Copies the factory.

        Plain values are deep-copied, pending parent factories are cloned and
        existing parent records are shared.
        """
        factory = cast("Factory", object.__new__(type(self)))
        factory.__values__ = {name: _clone_value(value) for name, value in self.__values__.items()}
        return factory

    def __copy__(self) -> Factory:
        return self.clone()

    def __deepcopy__(self, memo: dict[int, Any]) -> Factory:
        return self.clone()

    @classmethod
    def id_for_model(cls, model: Any) -> Any:
        """
        Returns the primary identifier of a persisted record.

        Reads `Meta.id_field` (or `settings.id_field`). Override for models
        storing their identifier differently.
        """
        return getattr(model, cls.meta.id_field or settings.id_field)

    def build_row(self, connection: Connection) -> dict[str, Any]:
        """
        Resolves the associations, in declaration order, and assembles the row.

        Pending parents are inserted here, each one recursively resolving its
        own associations first, so a chain is inserted from the top-most
        parent down.

        Returns:
            dict[str, Any]: Column name to value, foreign keys filled in.
        """
        row: dict[str, Any] = {}
        for name, value in self.__values__.items():
            field = self.meta.fields.get(name)
            if field is None:
                row[name] = value
            elif isinstance(field, AssociationField):
                row[field.get_column()] = None if value is None else value.resolve(connection)
            else:
                row[field.get_column()] = value
        return row

    def insert(self, connection: Connection) -> Any:
        """
        Inserts the factory into the database and returns the persisted record.

        Associations are resolved first (see `build_row`). Errors raised by
        the database are not caught: a failing parent insert means the row of
        this factory is never written. The factory itself is not modified and
        inserting it again inserts another row.
        """
        row = self.build_row(connection)
        return insert_record(connection, self.meta.table, row, self.meta.model)

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={value!r}" for name, value in self.__values__.items())
        return f"{type(self).__name__}({values})"


__all__ = ["Factory", "FactoryContextImplementation", "factory_context"]
