"""Read-only index of comments by file version and line"""

from __future__ import annotations

from collections import defaultdict
from types import MappingProxyType
from typing import Iterable

from models.review import Comment


class CommentIndex:
    """Maps (version_id, line) to the comments on that line, in display order"""

    def __init__(self, comments: Iterable[Comment] = ()):
        grouped: dict[tuple[int, int], list[Comment]] = defaultdict(list)
        for comment in sorted(comments, key=lambda c: (c.version_id, c.line, c.line_stamp)):
            grouped[(comment.version_id, comment.line)].append(comment)
        self._index = MappingProxyType({key: tuple(value) for key, value in grouped.items()})

    def lookup(self, version_id: int, line: int) -> tuple[Comment, ...]:
        return self._index.get((version_id, line), ())

    def has_comments(self, version_id: int, line: int) -> bool:
        return (version_id, line) in self._index

    def versions(self) -> set[int]:
        return {version_id for version_id, _ in self._index}

    def __len__(self) -> int:
        return sum(len(comments) for comments in self._index.values())
