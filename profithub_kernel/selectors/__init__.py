"""Read-only selector infrastructure."""

from profithub_kernel.selectors.base import BaseSelector

__all__ = ["BaseSelector"]
