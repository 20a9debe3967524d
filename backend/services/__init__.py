"""Services module - Diff parsing, reconstruction and rendering"""

from .hunk_grammar import HunkTokenizer, iter_hunks, parse_header
from .patched_text_reader import LineCursor, PatchedTextReader, PatchMismatchError
from .segment_classifier import classify, classify_resolved, resolve_segments
from .comment_index import CommentIndex
from .alignment_renderer import AlignmentRenderer
from .line_encoder import DefaultLineEncoder, GuardedEncoder, get_encoder_for_file
from .config_manager import ConfigManager
from .diff_runner import DiffRunner, DiffRunnerError
from .revision_store import BaseRevisionNotFoundError, RevisionStore, VersionNotFoundError
from .comparison_service import ComparisonService

__all__ = [
    "HunkTokenizer",
    "iter_hunks",
    "parse_header",
    "LineCursor",
    "PatchedTextReader",
    "PatchMismatchError",
    "classify",
    "classify_resolved",
    "resolve_segments",
    "CommentIndex",
    "AlignmentRenderer",
    "DefaultLineEncoder",
    "GuardedEncoder",
    "get_encoder_for_file",
    "ConfigManager",
    "DiffRunner",
    "DiffRunnerError",
    "BaseRevisionNotFoundError",
    "RevisionStore",
    "VersionNotFoundError",
    "ComparisonService",
]
