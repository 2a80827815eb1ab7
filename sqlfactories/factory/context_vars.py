from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import FactoryContext

# Context of the factory currently filling in its defaults. Nested factories
# (defaults of pending associations) copy it and increase the depth.
factory_context_var: ContextVar[FactoryContext] = ContextVar("factory_context")
