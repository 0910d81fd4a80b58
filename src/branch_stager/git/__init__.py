"""Git package: branch naming, working copy access and the edit workflow.

Only the dependency-free branch naming helpers are re-exported here; import
``branch_stager.git.repo`` and ``branch_stager.git.edit`` directly.
"""

from .branch_name import BranchKind, BranchName, kind_of, new_branch

__all__ = ["BranchKind", "BranchName", "kind_of", "new_branch"]
