"""Records paired with the branch that proposed them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from ..git.branch_name import BranchName

T = TypeVar("T")


@dataclass(frozen=True)
class Staged(Generic[T]):
    """A record and its staging tag.

    ``unmerged_branch`` is ``None`` for canonical (merged) rows.
    """

    value: T
    unmerged_branch: BranchName | None = None

    @property
    def is_canonical(self) -> bool:
        return self.unmerged_branch is None
