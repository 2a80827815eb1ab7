from __future__ import annotations

__version__ = "0.1.0"
from typing import TYPE_CHECKING

from ._monkay import create_monkay

if TYPE_CHECKING:
    from .conf.global_settings import FactorySettings
    from .core.insert import insert_record
    from .core.sequence import Sequence, sequence, use_sequence
    from .factory import (
        AssociationField,
        Factory,
        FactoryField,
        SequenceField,
        factory_context,
    )
    from .factory.association import Association, Existing, Pending

__all__ = [
    "monkay",
    "settings",
    "FactorySettings",
    # factories
    "Factory",
    "FactoryField",
    "AssociationField",
    "SequenceField",
    "factory_context",
    # associations
    "Association",
    "Existing",
    "Pending",
    # sequences
    "Sequence",
    "sequence",
    "use_sequence",
    # insert primitive
    "insert_record",
]

monkay = create_monkay(globals())

del create_monkay
