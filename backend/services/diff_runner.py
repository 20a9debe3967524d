"""
Diff Runner - Produce normal-format hunk text with the external diff tool

The service never computes differences itself. Both revisions are spooled to
temporary files and handed to the configured executable (``diff`` by
default), whose stdout is the hunk text the kernel consumes.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class DiffRunnerError(RuntimeError):
    """The external diff tool failed"""


class DiffRunner:
    """Invoke the external diff executable on two in-memory texts"""

    def __init__(self, config: dict[str, Any] | None = None):
        cfg = config or {}
        self.executable = cfg.get("executable", "diff")
        self.base_args = shlex.split(cfg.get("baseArgs") or "")
        self.ignore_whitespace_args = shlex.split(cfg.get("ignoreWhitespaceArgs") or "")
        self.timeout = cfg.get("timeoutSeconds", 30)

    def build_command(self, base_path: str, diff_path: str, ignore_whitespace: bool = False) -> list[str]:
        args = [self.executable, *self.base_args]
        if ignore_whitespace:
            args.extend(self.ignore_whitespace_args)
        args.extend([base_path, diff_path])
        return args

    def run(self, base_text: str, diff_text: str, ignore_whitespace: bool = False) -> str:
        """Return the diff tool's output for base_text -> diff_text"""
        with tempfile.TemporaryDirectory(prefix="review_diff_") as tmp:
            base_path = Path(tmp) / "base"
            diff_path = Path(tmp) / "diff"
            base_path.write_text(base_text, encoding="utf-8", newline="")
            diff_path.write_text(diff_text, encoding="utf-8", newline="")

            command = self.build_command(str(base_path), str(diff_path), ignore_whitespace)
            logger.debug(f"[DiffRunner] Running: {' '.join(command)}")
            try:
                result = subprocess.run(
                    command,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    timeout=self.timeout,
                )
            except FileNotFoundError as e:
                raise DiffRunnerError(f"Diff failed. Executable not found: {self.executable}") from e
            except subprocess.TimeoutExpired as e:
                raise DiffRunnerError(f"Diff failed. No result after {self.timeout}s") from e

        # 0: identical, 1: differences found, anything else is trouble
        if result.returncode not in (0, 1) or result.stderr:
            logger.error(f"[DiffRunner] {self.executable} exited with {result.returncode}: {result.stderr}")
            raise DiffRunnerError(f"Diff failed. {result.stderr.strip()}")

        return result.stdout
