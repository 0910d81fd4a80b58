"""Branch naming for staged change sets.

Every branch this system creates carries its kind as a prefix and a random
suffix, e.g. ``add-locations/downtown-park-Xk29fQa0Lm``.  The kind travels with
the ``BranchName`` value as a ``BranchKind``; the string form only exists at
the boundaries (git, the database and log lines).  A bare string received
later from a merge or close signal is parsed back with ``BranchName.parse``.
"""

from __future__ import annotations

import re
import secrets
import string
from dataclasses import dataclass
from enum import Enum

from ..constants import BRANCH_LABEL_MAX_LENGTH, BRANCH_SUFFIX_LENGTH

_SUFFIX_ALPHABET = string.ascii_letters + string.digits
_SLUG_INVALID = re.compile(r"[^a-z0-9]+")
_DEFAULT_LABEL = "change"


class BranchKind(Enum):
    """The category of change a branch proposes."""

    ADD_TESTS = "add-tests"
    ADD_LOCATIONS = "add-locations"
    REMOVE_TESTS = "remove-tests"
    UNKNOWN = "unknown"

    @property
    def prefix(self) -> str:
        return self.value


_KINDS_BY_PREFIX = {kind.prefix: kind for kind in BranchKind if kind is not BranchKind.UNKNOWN}


def _slugify(label: str) -> str:
    slug = _SLUG_INVALID.sub("-", label.lower()).strip("-")
    slug = slug[:BRANCH_LABEL_MAX_LENGTH].rstrip("-")
    return slug or _DEFAULT_LABEL


def _random_suffix() -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(BRANCH_SUFFIX_LENGTH))


@dataclass(frozen=True)
class BranchName:
    """An immutable branch name with its kind.

    ``raw`` is the exact string used in git and in the database.  ``label``
    and ``suffix`` are empty for branches of kind ``UNKNOWN`` that did not
    follow this system's naming convention.
    """

    raw: str
    kind: BranchKind
    label: str = ""
    suffix: str = ""

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def parse(cls, raw: str) -> BranchName:
        """Build a branch name from its string form.

        Never raises: strings without a recognized prefix yield a branch of
        kind ``UNKNOWN`` that still round-trips to the same string.
        """
        raw = raw.strip()
        kind = kind_of(raw)
        if kind is None:
            return cls(raw=raw, kind=BranchKind.UNKNOWN)
        rest = raw.split("/", 1)[1]
        label, _, suffix = rest.rpartition("-")
        return cls(raw=raw, kind=kind, label=label, suffix=suffix)


def new_branch(kind: BranchKind, label: str) -> BranchName:
    """Return a fresh branch name of ``kind`` for a human ``label``.

    Two calls never return equal names, even for identical labels.
    """
    if kind is BranchKind.UNKNOWN:
        raise ValueError("Cannot create a branch of unknown kind")
    slug = _slugify(label)
    suffix = _random_suffix()
    return BranchName(raw=f"{kind.prefix}/{slug}-{suffix}", kind=kind, label=slug, suffix=suffix)


def kind_of(name: str | BranchName) -> BranchKind | None:
    """Return the kind encoded in ``name`` or ``None`` if it is not recognized."""
    raw = str(name).strip()
    prefix, separator, rest = raw.partition("/")
    if not separator or not rest:
        return None
    return _KINDS_BY_PREFIX.get(prefix)
