"""Reload strategies."""

from confbind.domain.ports import ReloadStrategy
from confbind.infrastructure.reload.timed import TimedReloadStrategy

__all__ = ["ReloadStrategy", "TimedReloadStrategy"]
