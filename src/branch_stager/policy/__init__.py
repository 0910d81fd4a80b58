"""Policy utilities for branch-stager."""

from .redaction import redact_secrets

__all__ = [
    "redact_secrets",
]
