from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

    from .base import Factory


class Association:
    """
    A "belongs to" association that may or may not have been inserted yet.

    It is one of two variants:

    * `Existing` wraps a parent record that is already in the database. Any
      number of child factories may hold it, they all resolve to the same
      identifier and never insert the parent again.
    * `Pending` owns a parent factory. Resolving it inserts a new parent, so
      two children holding their own `Pending` get two distinct parents.

    Associations are read-only from the point of view of resolution.
    """

    __slots__ = ()

    @property
    def factory_class(self) -> type[Factory]:
        raise NotImplementedError()

    def resolve(self, connection: Connection) -> Any:
        """Returns the parent identifier, inserting at most one parent row."""
        raise NotImplementedError()

    def clone(self) -> Association:
        raise NotImplementedError()

    @classmethod
    def default(cls, factory_class: type[Factory]) -> Pending:
        """A `Pending` association wrapping the parent factory's defaults."""
        return Pending(factory_class())


class Existing(Association):
    """
    An associated record that has been inserted into the database.

    The identifier is copied when the association is created, resolving it
    never touches the connection nor the record.
    """

    __slots__ = ("model", "_factory_class", "id")

    def __init__(self, model: Any, factory_class: type[Factory]) -> None:
        self.model = model
        self._factory_class = factory_class
        self.id = factory_class.id_for_model(model)

    @classmethod
    def from_id(cls, id: Any, factory_class: type[Factory]) -> Existing:
        """
        An association to a persisted record known only by its identifier.

        `model` is `None` for such associations.
        """
        existing = cls.__new__(cls)
        existing.model = None
        existing._factory_class = factory_class
        existing.id = id
        return existing

    @property
    def factory_class(self) -> type[Factory]:
        return self._factory_class

    def resolve(self, connection: Connection) -> Any:
        logger.debug(f"Using existing {self._factory_class.__name__} record with id {self.id!r}")
        return self.id

    def clone(self) -> Existing:
        # the record is shared, never copied
        return self

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Existing):
            return NotImplemented
        return self._factory_class is other._factory_class and self.id == other.id

    def __hash__(self) -> int:
        return hash((self._factory_class, self.id))

    def __repr__(self) -> str:
        return f"Existing({self._factory_class.__name__}, id={self.id!r})"


class Pending(Association):
    """
    A factory for an associated record that hasn't been inserted yet.
    """

    __slots__ = ("factory",)

    def __init__(self, factory: Factory) -> None:
        self.factory = factory

    @property
    def factory_class(self) -> type[Factory]:
        return type(self.factory)

    def resolve(self, connection: Connection) -> Any:
        """
        Inserts a clone of the owned factory and returns the new identifier.

        The owned factory itself stays untouched, a failed insert leaves it
        as it was.
        """
        factory_class = self.factory_class
        logger.debug(f"Inserting pending {factory_class.__name__}")
        model = self.factory.clone().insert(connection)
        return factory_class.id_for_model(model)

    def clone(self) -> Pending:
        return Pending(self.factory.clone())

    def __repr__(self) -> str:
        return f"Pending({self.factory!r})"


__all__ = ["Association", "Existing", "Pending"]
