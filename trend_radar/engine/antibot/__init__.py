"""Anti-bot awareness: detection only, no evasion."""

from .detector import BlockDetector

__all__ = ["BlockDetector"]
