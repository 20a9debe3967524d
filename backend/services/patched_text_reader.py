"""
Patched Text Reader - Rebuild file text from a base text and normal-format hunks

Used to reconstruct a stored revision from its revision base plus the
incremental diff kept in the database, and to materialize "after" text when
only a diff is at hand.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Iterator

from models.diff import Hunk
from .hunk_grammar import hunk_stream, iter_text_lines

logger = logging.getLogger(__name__)


class PatchMismatchError(ValueError):
    """A removed line does not match the base text (strict mode only)"""


class LineCursor:
    """Forward-only reader over a sequence of lines"""

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self.line_number = 0
        self.text: str | None = None
        self.at_eof = False

    @classmethod
    def from_text(cls, text: str | None) -> "LineCursor":
        return cls(iter_text_lines(text))

    def advance(self) -> bool:
        """Move to the next line. Returns False once the source is exhausted."""
        if self.at_eof:
            return False
        line = next(self._lines, None)
        if line is None:
            self.at_eof = True
            self.text = None
            return False
        self.line_number += 1
        self.text = line
        return True

    def read_line(self) -> str | None:
        return self.text if self.advance() else None

    def __iter__(self) -> Iterator[str]:
        while self.advance():
            yield self.text


class PatchedTextReader:
    """Merge a base line cursor with a hunk stream, one output line per call.

    Hunks are expected in base order. A hunk whose effect line has already
    been passed is applied immediately, and hunks left over once the base is
    exhausted still contribute their added lines, so bad input misaligns the
    output instead of failing.
    """

    def __init__(
        self,
        base: LineCursor | str | Iterable[str] | None,
        hunks: str | Iterable[str] | Iterable[Hunk] | None = None,
        strict: bool = False,
    ):
        if not isinstance(base, LineCursor):
            base = LineCursor.from_text(base) if base is None or isinstance(base, str) else LineCursor(base)
        self._base = base
        self._hunks = hunk_stream(hunks)
        self._next_hunk: Hunk | None = next(self._hunks, None)
        self._pending: deque[str] = deque()
        self._next_base_line = 1
        self._finished = False
        self.strict = strict
        self.mismatch_count = 0

    @property
    def base_line_no(self) -> int:
        """Number of base lines consumed so far"""
        return self._next_base_line - 1

    @property
    def next_hunk_effect_line(self) -> float:
        if self._next_hunk is None:
            return float("inf")
        return self._next_hunk.base_start

    def read_line(self) -> str | None:
        """Return the next patched line, or None at end of input"""
        while True:
            if self._pending:
                return self._pending.popleft()

            hunk = self._next_hunk
            if hunk is not None and hunk.base_start <= self._next_base_line:
                if hunk.base_start < self._next_base_line:
                    logger.debug(
                        f"[PatchedTextReader] Hunk for line {hunk.base_start} arrived at line "
                        f"{self._next_base_line}, applying out of order"
                    )
                self._apply(hunk)
                continue

            if self._base.advance():
                self._next_base_line += 1
                return self._base.text

            if hunk is None:
                self._finish()
                return None

            # Base is exhausted but hunks remain
            self._apply(hunk)

    def read_lines(self) -> Iterator[str]:
        for line in iter(self.read_line, None):
            yield line

    def __iter__(self) -> Iterator[str]:
        return self.read_lines()

    def read_text(self) -> str:
        """Read everything left, newline-terminated"""
        lines = list(self.read_lines())
        return "\n".join(lines) + "\n" if lines else ""

    def _apply(self, hunk: Hunk):
        for expected in hunk.removed_lines:
            if self._base.advance():
                self._next_base_line += 1
                actual = self._base.text
            else:
                actual = None
            if actual != expected:
                self._record_mismatch(expected, actual)
        self._pending.extend(hunk.added_lines)
        self._next_hunk = next(self._hunks, None)

    def _record_mismatch(self, expected: str, actual: str | None):
        line_no = self.base_line_no
        if self.strict:
            raise PatchMismatchError(
                f"Base line {line_no} does not match the diff: expected {expected!r}, found {actual!r}"
            )
        self.mismatch_count += 1
        logger.debug(
            f"[PatchedTextReader] Removed line mismatch at base line {line_no}: "
            f"expected {expected!r}, found {actual!r}"
        )

    def _finish(self):
        if self._finished:
            return
        self._finished = True
        if self.mismatch_count:
            logger.warning(
                f"[PatchedTextReader] {self.mismatch_count} removed line(s) did not match the base text"
            )
