"""
Annotate the hunks of a unified diff with git blame.

Modules:
- diff_parser: turns unified diff text into HunkPair descriptors
- git_client: runs git blame for each descriptor
"""

from blamediff.diff_parser import DiffParser, DiffParseError
from blamediff.git_client import GitClient, GitError
from blamediff.models import BlameOptions, HunkPair, HunkSide, Op

__all__ = [
    'BlameOptions',
    'DiffParseError',
    'DiffParser',
    'GitClient',
    'GitError',
    'HunkPair',
    'HunkSide',
    'Op',
]
