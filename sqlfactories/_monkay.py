from __future__ import annotations

import os
from typing import TYPE_CHECKING

from monkay import Monkay

if TYPE_CHECKING:
    from sqlfactories.conf.global_settings import FactorySettings


def create_monkay(global_dict: dict) -> Monkay[None, FactorySettings]:
    """
    Initializes the Monkay instance of sqlfactories.

    Settings are looked up through the `SQLFACTORIES_SETTINGS_MODULE`
    environment variable and fall back to `FactorySettings`. The public names
    of the package are imported lazily.
    """
    monkay: Monkay[None, FactorySettings] = Monkay(
        global_dict,
        settings_path=lambda: os.environ.get(
            "SQLFACTORIES_SETTINGS_MODULE",
            "sqlfactories.conf.global_settings.FactorySettings",
        )
        or "",
        uncached_imports={"settings"},
        lazy_imports={
            "settings": lambda: monkay.settings,
            "FactorySettings": "sqlfactories.conf.global_settings:FactorySettings",
        },
        skip_all_update=True,
    )
    for name in [
        "Factory",
        "FactoryField",
        "AssociationField",
        "SequenceField",
        "factory_context",
    ]:
        monkay.add_lazy_import(name, f"sqlfactories.factory.{name}")

    for name in ["Association", "Existing", "Pending"]:
        monkay.add_lazy_import(name, f"sqlfactories.factory.association.{name}")

    for name in ["Sequence", "sequence", "use_sequence"]:
        monkay.add_lazy_import(name, f"sqlfactories.core.sequence.{name}")

    monkay.add_lazy_import("insert_record", "sqlfactories.core.insert.insert_record")
    return monkay
