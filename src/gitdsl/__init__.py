"""Git DSL diff engine.

Exposes per-file differences between two revisions of a repository as
raw diff text, structured diff chunks, JSON patches and navigable JSON
diff trees for rule-evaluation environments.
"""

from .config import SessionConfig
from .dsl import GitDSL, git_json_to_git_dsl
from .model import RepositorySnapshot, RevisionPair

__version__ = "1.0.0"
__author__ = "Git DSL Team"

__all__ = [
    "GitDSL",
    "RepositorySnapshot",
    "RevisionPair",
    "SessionConfig",
    "git_json_to_git_dsl",
]
