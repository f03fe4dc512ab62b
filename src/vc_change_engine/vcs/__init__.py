"""
Version control integration.

:class:`GitProvider` is the abstract capability set the engine consumes;
:class:`GitClient` implements it on top of the ``git`` executable.
"""

from .provider import GitFileChange, GitProvider, GitStatus  # noqa: F401
from .git_client import GitClient, GitError  # noqa: F401
