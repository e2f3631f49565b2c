# Per-file scan context: file path, source text, split lines, language tag.
# Also home of the line indexer every evaluator uses to turn offsets into
# (line, snippet) pairs, so reported lines always resolve in the same buffer.

import logging
import re
from bisect import bisect_left
from pathlib import Path
from typing import Optional, Union

from coderev.languages import classify

logger = logging.getLogger(__name__)

# CRLF first so it counts as one boundary, not two.
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """
    Split text on CRLF, CR and LF alike.

    A trailing line break yields a trailing empty line, so "a\\n" has two
    lines.
    """
    return LINE_BREAK.split(text)


class LineIndex:
    """
    Offset -> line lookups over one text buffer.

    Boundary start offsets are computed once; each lookup is a bisect.
    """

    def __init__(self, text: str, lines: Optional[list[str]] = None) -> None:
        self.lines = lines if lines is not None else split_lines(text)
        self._breaks = [m.start() for m in LINE_BREAK.finditer(text)]

    def line_number(self, offset: int) -> int:
        """1 + number of line boundaries that begin strictly before offset."""
        return bisect_left(self._breaks, offset) + 1

    def snippet(self, line: int) -> str:
        """Trimmed text of a 1-based line, or "" if out of range."""
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1].strip()
        return ""

    def locate(self, offset: int) -> tuple[int, str]:
        line = self.line_number(offset)
        return line, self.snippet(line)


def locate(text: str, offset: int) -> tuple[int, str]:
    """
    Return (1-based line number, trimmed line text) for a character offset.

    Convenience for one-off lookups; evaluators share a LineIndex through
    ScanContext instead.
    """
    return LineIndex(text).locate(offset)


class ScanContext:
    """
    Per-file state for one scan pass: path, text, lines, language.

    Built once per file and shared by every rule evaluated against it.
    """

    def __init__(self, path: Path, text: str, language: Optional[str] = None) -> None:
        self.path = path
        self.text = text
        self.lines = split_lines(text)
        self.language = language if language is not None else classify(path)
        self.index = LineIndex(text, self.lines)

    def locate(self, offset: int) -> tuple[int, str]:
        return self.index.locate(offset)

    def __repr__(self) -> str:
        return f"ScanContext(path={self.path!s}, language={self.language}, lines={len(self.lines)})"


def read_source(path: Path, errors: str = "replace") -> Optional[str]:
    """
    Read a file as UTF-8 text.

    Undecodable bytes are replaced for review. Pass errors="surrogateescape"
    when the text is written back, so those bytes survive unchanged.

    Returns None and logs the error if the file cannot be read.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None
    return raw.decode("utf-8", errors=errors)


def create_context(
    path: Union[str, Path],
    text: Optional[str] = None,
) -> Optional[ScanContext]:
    """
    Build a ScanContext for a file.

    - text given: used as-is, nothing is read.
    - text None: the file is read; an unreadable file returns None (logged).
    """
    path = Path(path)
    if text is None:
        text = read_source(path)
        if text is None:
            return None

    ctx = ScanContext(path=path, text=text)
    logger.info("Loaded %s: %d line(s), language=%s", path, len(ctx.lines), ctx.language)
    return ctx
