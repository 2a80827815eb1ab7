from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from monkay import Monkay

    from sqlfactories.conf.global_settings import FactorySettings


@lru_cache
def get_sqlfactories_monkay() -> Monkay[None, FactorySettings]:
    """
    Returns the `Monkay` instance of sqlfactories with its settings evaluated.

    The settings class is read from `SQLFACTORIES_SETTINGS_MODULE` on first
    access and the evaluation happens only once.
    """
    from sqlfactories import monkay

    monkay.evaluate_settings(on_conflict="error", ignore_import_errors=False)

    return monkay


class SettingsForward:
    """
    Forwards attribute access to the active settings.

    `monkay.with_settings` may swap the settings at any time, so no reference
    to a settings object is kept here.
    """

    def __getattribute__(self, name: str) -> Any:
        monkay = get_sqlfactories_monkay()
        return getattr(monkay.settings, name)


settings: FactorySettings = cast("FactorySettings", SettingsForward())


__all__ = ["settings"]
