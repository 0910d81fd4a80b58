"""Top‑level package for branch-stager.

This package turns plain-text acceptance tests and location lists into code
changes on a shared git repository, opens a pull request for each change and
keeps a local SQLite cache of what is proposed versus what is merged.  See
`DESIGN.md` for more information.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
