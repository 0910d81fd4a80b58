"""Serialized access to the single local git working copy.

``GitRepository`` owns one exclusive lease over the working copy.  Callers
obtain a ``RepositoryTransaction`` with ``repository.transaction()``; while it
is held no other transaction can run, so every git mutation in the process is
serialized.  The transaction forwards to a ``RepositoryClient``.  In
production that is ``GitCliClient``, which runs the git command-line tool; tests
use a recording no-op client (see ``tests/conftest.py``).
"""

from __future__ import annotations

import logging
import os
import subprocess
import threading
import time
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Protocol

from ..constants import GIT_AUTHOR_EMAIL, GIT_AUTHOR_NAME, GIT_COMMAND_TIMEOUT_S
from ..policy.redaction import redact_secrets
from .branch_name import BranchName
from .metadata import RepositoryMetadata

logger = logging.getLogger(__name__)

# The only git subcommands this client ever runs
ALLOWED_GIT_SUBCMDS = {
    "add",
    "branch",
    "clean",
    "commit",
    "diff",
    "pull",
    "push",
    "reset",
    "switch",
}


class PullStatus(Enum):
    """Result of pulling a remote branch into the current branch."""

    SUCCESS = "success"
    MERGE_CONFLICT = "merge_conflict"


class GitCommandError(RuntimeError):
    """A git command failed for a reason other than a merge conflict."""

    def __init__(self, argv: Sequence[str], exit_code: int, stderr: str) -> None:
        self.argv = list(argv)
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"'{' '.join(self.argv)}' exited with {exit_code}: {stderr.strip()}")


class RepositoryClient(Protocol):
    """Interface for the operations performed on the working copy.

    None of these are safe to call concurrently; ``GitRepository`` guarantees
    exclusive access.
    """

    @property
    def metadata(self) -> RepositoryMetadata:
        ...

    def hard_reset_to_head(self) -> None:
        ...

    def clean_untracked(self) -> None:
        ...

    def switch_branch(self, name: str) -> None:
        ...

    def pull_branch(self, name: str) -> PullStatus:
        ...

    def commit_all(self, message: str) -> None:
        ...

    def checkout_new_branch(self, branch: BranchName) -> None:
        ...

    def push_changes(self, branch: BranchName) -> None:
        ...

    def delete_local_branch(self, branch: BranchName) -> bool:
        ...


class GitCliClient:
    """Client that executes git commands in the working copy.

    Commands run with ``shell=False``, a timeout and a non-interactive
    environment.  Output is redacted before it is logged or attached to an
    exception.
    """

    def __init__(
        self,
        metadata: RepositoryMetadata,
        *,
        secrets: Sequence[str] = (),
        ssh_key_path: str | None = None,
        timeout_s: int = GIT_COMMAND_TIMEOUT_S,
    ) -> None:
        self._metadata = metadata
        self._secrets = list(secrets)
        self._ssh_key_path = ssh_key_path
        self._timeout_s = timeout_s

    @property
    def metadata(self) -> RepositoryMetadata:
        return self._metadata

    def _prepare_env(self) -> dict[str, str]:
        """Prepare environment variables for git execution."""
        env = dict(os.environ)

        # Disable git terminal prompts - prevents hangs if auth fails
        env["GIT_TERMINAL_PROMPT"] = "0"

        env.setdefault("GIT_AUTHOR_NAME", GIT_AUTHOR_NAME)
        env.setdefault("GIT_AUTHOR_EMAIL", GIT_AUTHOR_EMAIL)
        env.setdefault("GIT_COMMITTER_NAME", GIT_AUTHOR_NAME)
        env.setdefault("GIT_COMMITTER_EMAIL", GIT_AUTHOR_EMAIL)

        if self._ssh_key_path:
            env["GIT_SSH_COMMAND"] = f"ssh -i {self._ssh_key_path} -o IdentitiesOnly=yes"
        return env

    def run(self, *args: str) -> dict[str, object]:
        """Run ``git <args>`` in the working copy and return the raw result."""
        if not args or args[0] not in ALLOWED_GIT_SUBCMDS:
            raise PermissionError(f"git {args[0] if args else ''} is not allowed")

        argv = ["git", *args]
        timed_out = False
        start_ns = time.time_ns()
        try:
            proc = subprocess.run(
                argv,
                cwd=str(self._metadata.root),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                shell=False,
                timeout=self._timeout_s,
                text=True,
                env=self._prepare_env(),
            )
            stdout = proc.stdout or ""
            stderr = proc.stderr or ""
            exit_code = proc.returncode
        except subprocess.TimeoutExpired:
            timed_out = True
            stdout = ""
            stderr = "Command timed out"
            exit_code = 124

        duration_ms = int((time.time_ns() - start_ns) / 1_000_000)
        stdout = redact_secrets(stdout, self._secrets)
        stderr = redact_secrets(stderr, self._secrets)
        logger.debug("%s exited with %d in %dms", " ".join(argv), exit_code, duration_ms)

        return {
            "argv": argv,
            "exit_code": exit_code,
            "stdout": stdout,
            "stderr": stderr,
            "duration_ms": duration_ms,
            "timed_out": timed_out,
        }

    def _check(self, *args: str) -> dict[str, object]:
        result = self.run(*args)
        if result["exit_code"] != 0:
            # git reports some failures (e.g. "nothing to commit") on stdout
            detail = str(result["stderr"]) or str(result["stdout"])
            raise GitCommandError(result["argv"], int(result["exit_code"]), detail)
        return result

    def hard_reset_to_head(self) -> None:
        self._check("reset", "--hard", "HEAD")

    def clean_untracked(self) -> None:
        self._check("clean", "-fd")

    def switch_branch(self, name: str) -> None:
        # --no-guess keeps this from silently creating a branch from a remote one
        self._check("switch", "--no-guess", name)

    def pull_branch(self, name: str) -> PullStatus:
        result = self.run("pull", "--no-rebase", "--no-edit", self._metadata.remote, name)
        if result["exit_code"] == 0:
            return PullStatus.SUCCESS
        if self._has_unmerged_paths():
            logger.warning("Merge conflict pulling %s/%s", self._metadata.remote, name)
            return PullStatus.MERGE_CONFLICT
        raise GitCommandError(result["argv"], int(result["exit_code"]), str(result["stderr"]))

    def _has_unmerged_paths(self) -> bool:
        result = self.run("diff", "--name-only", "--diff-filter=U")
        return result["exit_code"] == 0 and bool(str(result["stdout"]).strip())

    def commit_all(self, message: str) -> None:
        self._check("add", "-A")
        self._check("commit", "-m", message)

    def checkout_new_branch(self, branch: BranchName) -> None:
        self._check("switch", "-c", str(branch))

    def push_changes(self, branch: BranchName) -> None:
        ref = f"refs/heads/{branch}"
        self._check("push", self._metadata.remote, f"{ref}:{ref}")

    def delete_local_branch(self, branch: BranchName) -> bool:
        result = self.run("branch", "-D", str(branch))
        if result["exit_code"] != 0:
            logger.warning("Failed to delete local branch %s: %s", branch, str(result["stderr"]).strip())
            return False
        return True


class RepositoryTransaction:
    """Exclusive handle to the working copy.

    Acquired by ``GitRepository.transaction()`` and released by ``release()``
    or on leaving a ``with`` block.  Releasing twice is a no-op.  Any client
    call after release raises ``RuntimeError``.
    """

    def __init__(self, client: RepositoryClient, lock: threading.Lock) -> None:
        self._client = client
        self._lock = lock
        self._released = False

    def __enter__(self) -> RepositoryTransaction:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    @property
    def is_released(self) -> bool:
        return self._released

    @property
    def metadata(self) -> RepositoryMetadata:
        return self._client.metadata

    @property
    def client(self) -> RepositoryClient:
        if self._released:
            raise RuntimeError("Repository transaction has already been released")
        return self._client

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lock.release()

    def hard_reset_to_head(self) -> None:
        self.client.hard_reset_to_head()

    def clean_untracked(self) -> None:
        self.client.clean_untracked()

    def switch_branch(self, name: str) -> None:
        self.client.switch_branch(name)

    def pull_branch(self, name: str) -> PullStatus:
        return self.client.pull_branch(name)

    def commit_all(self, message: str) -> None:
        self.client.commit_all(message)

    def checkout_new_branch(self, branch: BranchName) -> None:
        self.client.checkout_new_branch(branch)

    def push_changes(self, branch: BranchName) -> None:
        self.client.push_changes(branch)

    def delete_local_branch(self, branch: BranchName) -> bool:
        return self.client.delete_local_branch(branch)


class GitRepository:
    """Registry for the single working copy and its lease.

    Create one per process.  ``transaction()`` blocks until any prior
    transaction is released.  With ``reset_on_acquire`` the working copy is
    reset to HEAD and stripped of untracked files before the transaction is
    handed out, so changes abandoned by a failed operation never leak into
    the next one.
    """

    def __init__(self, client: RepositoryClient, *, reset_on_acquire: bool = True) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._reset_on_acquire = reset_on_acquire

    @classmethod
    def open(
        cls,
        metadata: RepositoryMetadata,
        *,
        secrets: Sequence[str] = (),
        ssh_key_path: str | None = None,
        reset_on_acquire: bool = True,
    ) -> GitRepository:
        """Open the working copy at ``metadata.root`` with the git CLI client."""
        root = Path(metadata.root)
        if not (root / ".git").exists():
            raise RuntimeError(f"No git working copy at {root}")
        client = GitCliClient(metadata, secrets=secrets, ssh_key_path=ssh_key_path)
        return cls(client, reset_on_acquire=reset_on_acquire)

    @property
    def metadata(self) -> RepositoryMetadata:
        return self._client.metadata

    def transaction(self) -> RepositoryTransaction:
        self._lock.acquire()
        transaction = RepositoryTransaction(self._client, self._lock)
        if self._reset_on_acquire:
            try:
                transaction.hard_reset_to_head()
                transaction.clean_untracked()
            except BaseException:
                transaction.release()
                raise
        return transaction
