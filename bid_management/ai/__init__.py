"""AI-assist completion client."""

from .client import AIClient

__all__ = ["AIClient"]
