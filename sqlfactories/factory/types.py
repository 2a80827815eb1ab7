from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Literal, Protocol, TypeAlias, TypedDict

if TYPE_CHECKING:
    from faker import Faker

    from sqlfactories.core.sequence import Sequence

    from .fields import FactoryField


class _FactoryContext(TypedDict):
    faker: Faker
    """Faker instance used by callbacks given as provider names."""
    sequence: Sequence
    """Sequence used by `SequenceField`."""
    depth: int
    """Nesting depth of default associations being built."""


if TYPE_CHECKING:
    # Attribute access falls through to the Faker instance, `context.email()`.
    class FactoryContext(Faker, _FactoryContext, Protocol):
        pass
else:
    FactoryContext = _FactoryContext


FactoryParameterCallback: TypeAlias = Callable[["FactoryField", FactoryContext, str], Any]
"""Computes one parameter of a field callback: `(field, context, parameter_name)`."""

FactoryParameters: TypeAlias = dict[str, Any | FactoryParameterCallback]

FactoryCallback: TypeAlias = Callable[["FactoryField", FactoryContext, dict[str, Any]], Any]
"""Produces a field default: `(field, context, resolved_parameters)`."""

FieldFactoryCallback: TypeAlias = str | FactoryCallback
"""A Faker provider name (`"email"`) or a `FactoryCallback`."""

ValidationMode: TypeAlias = Literal["none", "warn", "error"]
