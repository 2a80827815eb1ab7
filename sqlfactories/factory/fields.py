from __future__ import annotations

import copy
from collections.abc import Callable
from inspect import isclass
from typing import TYPE_CHECKING, Any, cast

import monkay

from sqlfactories.exceptions import FactoryDefinitionError, InvalidAssociationError
from sqlfactories.utils.compat import is_class_and_subclass

from .association import Association, Existing, Pending

if TYPE_CHECKING:
    from .base import Factory
    from .types import (
        FactoryCallback,
        FactoryContext,
        FactoryParameters,
        FieldFactoryCallback,
    )


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


class FactoryField:
    """
    A plain factory field.

    The default is either a static `default` (deep-copied for every factory
    instance) or produced by `callback` when the factory is constructed. A
    string callback names a Faker provider, `FactoryField(callback="email")`.
    `exclude=True` removes a field inherited from a parent factory.
    """

    owner: type[Factory]
    name: str = ""
    parameters: FactoryParameters

    def __init__(
        self,
        *,
        default: Any = UNSET,
        callback: FieldFactoryCallback | None = None,
        parameters: FactoryParameters | None = None,
        column: str = "",
        exclude: bool = False,
    ) -> None:
        self.default = default
        self.exclude = exclude
        self.column = column
        self.parameters = parameters or {}
        if isinstance(callback, str):
            callback_name = callback
            callback = lambda field, context, parameters: getattr(context["faker"], callback_name)(  # noqa
                **parameters
            )
        self.callback: FactoryCallback | None = callback

    def get_column(self) -> str:
        return self.column or self.name

    def get_parameters(
        self,
        *,
        context: FactoryContext,
        parameters: FactoryParameters | None = None,
    ) -> dict[str, Any]:
        current_parameters: dict[str, Any] = {}
        for parameter_dict in [parameters or {}, self.parameters]:
            for name, parameter in parameter_dict.items():
                if name not in current_parameters:
                    if callable(parameter) and not isclass(parameter):
                        current_parameters[name] = parameter(self, context, name)
                    else:
                        current_parameters[name] = parameter
        return current_parameters

    def get_default(self, context: FactoryContext) -> Any:
        if self.callback is not None:
            return self.callback(self, context, self.get_parameters(context=context))
        if self.default is UNSET:
            raise FactoryDefinitionError(
                f'Field "{self.name}" of "{self.owner.__name__}" has neither a default nor a callback.'
            )
        return copy.deepcopy(self.default)

    def to_value(self, value: Any) -> Any:
        """Converts a value given to a setter or the constructor."""
        return value

    def __copy__(self) -> FactoryField:
        _copy = FactoryField(
            default=self.default,
            callback=self.callback,
            parameters=self.parameters.copy(),
            column=self.column,
            exclude=self.exclude,
        )
        _copy.name = self.name
        return _copy

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def SequenceField(format_fn: Callable[[int], Any], **kwargs: Any) -> FactoryField:
    """
    A field whose default is minted from the active sequence, for values that
    must be unique across inserted rows.

    ```python
    email = SequenceField(lambda i: f"user-{i}@example.com")
    ```
    """

    def callback(field: FactoryField, context: FactoryContext, parameters: dict[str, Any]) -> Any:
        return context["sequence"](format_fn)

    return FactoryField(callback=callback, **kwargs)


class AssociationField(FactoryField):
    """
    A "belongs to" field referencing a parent factory.

    The factory value of this field is an `Association`. A required field
    defaults to `Pending(ParentFactory(**defaults))`, an optional one to `None`.
    On insert it is resolved into the parent identifier and written to
    `column`, which defaults to the field name plus
    `settings.association_column_suffix` (`country` -> `country_id`).

    Parameters:
        factory_class (type[Factory] | str): The parent factory, or its dotted
            import path for factories declared later (or self references).
        optional (bool): Allows `None`, written as NULL. Defaults to `False`.
        column (str): Foreign key column name.
        defaults (dict[str, Any] | None): Keyword arguments for the default
            parent factory.
    """

    def __init__(
        self,
        factory_class: type[Factory] | str,
        *,
        optional: bool = False,
        column: str = "",
        defaults: dict[str, Any] | None = None,
        exclude: bool = False,
    ) -> None:
        super().__init__(column=column, exclude=exclude)
        self._factory_class = factory_class
        self.optional = optional
        self.defaults = defaults or {}

    @property
    def factory_class(self) -> type[Factory]:
        from .base import Factory

        factory_class = self._factory_class
        if isinstance(factory_class, str):
            factory_class = cast("type[Factory]", monkay.load(factory_class))
            self._factory_class = factory_class
        if not is_class_and_subclass(factory_class, Factory) or factory_class.meta.abstract:
            raise FactoryDefinitionError(
                f'Association "{self.name}" needs a concrete Factory subclass, got {factory_class!r}.'
            )
        return factory_class

    def get_column(self) -> str:
        if self.column:
            return self.column
        from sqlfactories.conf import settings

        return f"{self.name}{settings.association_column_suffix}"

    def get_default(self, context: FactoryContext) -> Association | None:
        if self.optional:
            return None
        return Pending(self.factory_class(**self.defaults))

    def to_value(self, value: Any) -> Association | None:
        """
        Converts a setter or constructor value into an association.

        A persisted parent record becomes `Existing`, a parent factory becomes
        a `Pending` owning a clone of it, so handing one factory to two
        children still inserts two parents.
        """
        factory_class = self.factory_class
        if value is None:
            if self.optional:
                return None
            raise InvalidAssociationError(
                f'Association "{self.name}" of "{self.owner.__name__}" is required and cannot be None.'
            )
        if isinstance(value, Association):
            if not issubclass(value.factory_class, factory_class):
                raise InvalidAssociationError(
                    f'Association "{self.name}" expects {factory_class.__name__}, '
                    f"got an association of {value.factory_class.__name__}."
                )
            return value.clone()
        if isinstance(value, factory_class):
            return Pending(value.clone())
        if isinstance(value, factory_class.meta.model):
            return Existing(value, factory_class)
        raise InvalidAssociationError(
            f'Association "{self.name}" accepts a {factory_class.meta.model.__name__} record '
            f"or a {factory_class.__name__}, got {type(value).__name__}."
        )

    def from_id(self, value: Any) -> Existing | None:
        """
        Converts a value given for the foreign key column into an association
        to the record with that identifier.
        """
        if value is None:
            return self.to_value(None)
        return Existing.from_id(value, self.factory_class)

    def __copy__(self) -> AssociationField:
        _copy = AssociationField(
            self._factory_class,
            optional=self.optional,
            column=self.column,
            defaults=self.defaults.copy(),
            exclude=self.exclude,
        )
        _copy.name = self.name
        return _copy

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, optional={self.optional})"


__all__ = ["AssociationField", "FactoryField", "SequenceField"]
