"""Bot strategies for Tarneeb."""

from .base import BotStrategy
from .baseline import BaselineBot

__all__ = ["BotStrategy", "BaselineBot"]
