"""Interface binding package."""

from confbind.infrastructure.binding.binder import (
    Binder,
    BoundMember,
    BoundProxy,
    derive_key,
    setting,
)

__all__ = ["Binder", "BoundMember", "BoundProxy", "derive_key", "setting"]
