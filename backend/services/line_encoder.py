"""
Line Encoders - Convert raw line text into display markup

Syntax highlighters live outside this service. They are plugged in per file
extension through the ``encoders`` config section as ``module:attr`` factory
paths; the factory is called with the extension and returns an encoder.
"""

from __future__ import annotations

import html
import importlib
import logging
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TAB_REPLACEMENT = "  \\t"


class DefaultLineEncoder:
    """Plain HTML encoding, no highlighting"""

    def encode_line(self, line: str, max_width: int | None, tab_replacement: str) -> str:
        """Replace tabs, split into chunks of max_width, escape and join with <br/>"""
        line = line.replace("\t", tab_replacement)
        if not max_width or max_width <= 0:
            return html.escape(line, quote=False)
        chunks = [line[pos : pos + max_width] for pos in range(0, len(line), max_width)]
        return "<br/>".join(html.escape(chunk, quote=False) for chunk in chunks)


class GuardedEncoder:
    """Wrap a third-party encoder so its failures fall back to plain encoding"""

    def __init__(self, encoder: Any, name: str = ""):
        self._encoder = encoder
        self._fallback = DefaultLineEncoder()
        self._name = name or type(encoder).__name__
        self.failures = 0

    def encode_line(self, line: str, max_width: int | None, tab_replacement: str) -> str:
        try:
            encoded = self._encoder.encode_line(line, max_width, tab_replacement)
            if isinstance(encoded, str):
                return encoded
            logger.warning(f"[LineEncoder] {self._name} returned {type(encoded).__name__}, not markup")
        except Exception as e:
            logger.warning(f"[LineEncoder] {self._name} failed, using default encoding: {e}")
        self.failures += 1
        return self._fallback.encode_line(line, max_width, tab_replacement)


def tab_replacement_for(spaces_per_tab: int | None) -> str:
    """Text shown in place of a tab character"""
    if spaces_per_tab is not None and spaces_per_tab > 0:
        return " " * spaces_per_tab
    return DEFAULT_TAB_REPLACEMENT


def _load_factory(path: str):
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Encoder path must look like 'module:attr', got {path!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def get_encoder_for_file(file_name: str, encoders: dict[str, str] | None = None):
    """Return the configured encoder for a file's extension, or the default"""
    _, dot, ext = file_name.rpartition(".")
    ext = ext.lower() if dot else ""
    path = (encoders or {}).get(ext) if ext else None
    if not path:
        return DefaultLineEncoder()

    try:
        encoder = _load_factory(path)(ext)
    except Exception as e:
        logger.error(f"[LineEncoder] Cannot load encoder {path!r} for .{ext}: {e}")
        return DefaultLineEncoder()
    if encoder is None:
        return DefaultLineEncoder()
    return GuardedEncoder(encoder, name=path)
