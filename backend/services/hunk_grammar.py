"""
Hunk Grammar - Parse the "normal" output format of line-oriented diff tools

A hunk is a header such as ``12,14c12`` followed by ``< `` lines removed from
the base file, an optional ``---`` separator and ``> `` lines inserted in the
new file. Anything that is neither a header nor a body line ends the stream.
"""

from __future__ import annotations

import itertools
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from models.diff import Hunk, HunkOp

logger = logging.getLogger(__name__)

HEADER_RE = re.compile(r"^(\d+)(?:,(\d+))?([adc])(.*)$")

REMOVED_PREFIX = "< "
ADDED_PREFIX = "> "
SEPARATOR = "---"
NO_NEWLINE_MARKER = "\\ No newline at end of file"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class HunkHeader:
    """Parsed hunk header line"""

    op: HunkOp
    start: int
    end: int | None
    trailing: str

    @property
    def effect_line(self) -> int:
        """1-indexed base line at which the hunk starts to apply"""
        # 'a' inserts after `start`
        if self.op is HunkOp.ADD:
            return self.start + 1
        return self.start


def parse_header(line: str | None) -> HunkHeader | None:
    """Parse a hunk header, returning None when the line is not one"""
    if line is None:
        return None
    match = HEADER_RE.match(line)
    if not match:
        return None
    start, end, op, trailing = match.groups()
    return HunkHeader(
        op=HunkOp(op),
        start=int(start),
        end=int(end) if end is not None else None,
        trailing=trailing,
    )


def iter_text_lines(text: str | None) -> Iterator[str]:
    """Split text into lines the way a text reader does.

    Accepts ``\\r\\n``, ``\\r`` and ``\\n`` terminators and does not produce a
    trailing empty line for a terminated last line.
    """
    if not text:
        return
    pos = 0
    for match in _LINE_BREAK_RE.finditer(text):
        yield text[pos : match.start()]
        pos = match.end()
    if pos < len(text):
        yield text[pos:]


def as_lines(source: str | Iterable[str] | None) -> Iterator[str]:
    """Normalize raw text or an iterable of lines to an iterator of lines"""
    if source is None:
        return iter(())
    if isinstance(source, str):
        return iter_text_lines(source)
    return iter(source)


class TokenizerState(str, Enum):
    IDLE = "idle"
    IN_HEADER = "in_header"
    IN_BODY = "in_body"
    STOPPED = "stopped"


class HunkTokenizer:
    """Line-at-a-time state machine producing Hunk records.

    ``feed`` returns a hunk whenever the line just fed completes one;
    ``finish`` flushes the hunk still open at end of input.
    """

    def __init__(self):
        self.state = TokenizerState.IDLE
        self.line_number = 0
        self._header: HunkHeader | None = None
        self._removed: list[str] = []
        self._added: list[str] = []

    @property
    def stopped(self) -> bool:
        return self.state is TokenizerState.STOPPED

    def feed(self, line: str) -> Hunk | None:
        if self.stopped:
            return None
        self.line_number += 1

        if line == NO_NEWLINE_MARKER:
            return None

        if self.state is not TokenizerState.IDLE and self._feed_body(line):
            self.state = TokenizerState.IN_BODY
            return None

        header = parse_header(line)
        completed = self._flush()
        if header is None:
            logger.warning(
                f"[HunkGrammar] Unexpected line {self.line_number}, treating as end of diff: {line[:80]!r}"
            )
            self.state = TokenizerState.STOPPED
            return completed

        self._header = header
        self.state = TokenizerState.IN_HEADER
        return completed

    def finish(self) -> Hunk | None:
        completed = self._flush()
        if not self.stopped:
            self.state = TokenizerState.IDLE
        return completed

    def _feed_body(self, line: str) -> bool:
        if line.startswith(REMOVED_PREFIX) or line == REMOVED_PREFIX.rstrip():
            self._removed.append(line[len(REMOVED_PREFIX) :])
            return True
        if line.startswith(ADDED_PREFIX) or line == ADDED_PREFIX.rstrip():
            self._added.append(line[len(ADDED_PREFIX) :])
            return True
        return line == SEPARATOR

    def _flush(self) -> Hunk | None:
        if self._header is None:
            return None
        header = self._header
        hunk = Hunk(
            op=header.op,
            header_start=header.start,
            header_end=header.end,
            base_start=header.effect_line,
            removed_lines=self._removed,
            added_lines=self._added,
        )
        self._header = None
        self._removed = []
        self._added = []
        return hunk


def iter_hunks(source: str | Iterable[str] | None, tokenizer: HunkTokenizer | None = None) -> Iterator[Hunk]:
    """Lazily yield the hunks of normal-format diff output.

    Pass a ``tokenizer`` to inspect afterwards whether the stream ended on
    an unexpected line (``tokenizer.stopped``).
    """
    tokenizer = tokenizer or HunkTokenizer()
    for line in as_lines(source):
        hunk = tokenizer.feed(line)
        if hunk is not None:
            yield hunk
        if tokenizer.stopped:
            return
    hunk = tokenizer.finish()
    if hunk is not None:
        yield hunk


def hunk_stream(
    source: str | Iterable[str] | Iterable[Hunk] | None,
    tokenizer: HunkTokenizer | None = None,
) -> Iterator[Hunk]:
    """Accept raw diff text, raw lines or already parsed hunks"""
    if source is None or isinstance(source, str):
        return iter_hunks(source, tokenizer)
    items = iter(source)
    first = next(items, None)
    if first is None:
        return iter(())
    rest = itertools.chain([first], items)
    if isinstance(first, Hunk):
        return rest
    return iter_hunks(rest, tokenizer)
