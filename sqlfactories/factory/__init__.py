from .association import Association, Existing, Pending
from .base import Factory, factory_context
from .fields import AssociationField, FactoryField, SequenceField
from .types import FactoryContext

__all__ = [
    "Association",
    "AssociationField",
    "Existing",
    "Factory",
    "FactoryContext",
    "FactoryField",
    "Pending",
    "SequenceField",
    "factory_context",
]
