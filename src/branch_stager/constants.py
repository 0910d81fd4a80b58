"""Global constants for branch-stager.

These values serve as defaults for configuration and limit enforcement.
Changing these values is discouraged; instead override environment variables
as needed.
"""

import os

# Git
GIT_COMMAND_TIMEOUT_S = int(os.environ.get("GIT_COMMAND_TIMEOUT_S", 120))
GIT_AUTHOR_NAME = os.environ.get("GIT_AUTHOR_NAME", "Branch Stager")
GIT_AUTHOR_EMAIL = os.environ.get("GIT_AUTHOR_EMAIL", "branch-stager@localhost")

# Branch names
BRANCH_SUFFIX_LENGTH = 10
BRANCH_LABEL_MAX_LENGTH = int(os.environ.get("BRANCH_LABEL_MAX_LENGTH", 40))

# GitHub
GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT_S = float(os.environ.get("GITHUB_TIMEOUT_S", 10.0))

# SQLite
SQLITE_BUSY_TIMEOUT_S = float(os.environ.get("SQLITE_BUSY_TIMEOUT_S", 5.0))

# Logging
DEFAULT_LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
