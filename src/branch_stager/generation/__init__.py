"""Source writers for the managed repository."""

from .typescript import write_locations, write_test

__all__ = ["write_locations", "write_test"]
