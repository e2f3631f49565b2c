# Language classification: map a file path to the language tag rules filter on.

from pathlib import Path
from typing import Union

UNKNOWN = "unknown"

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".ts": "typescript",
    ".tsx": "typescript",
    ".js": "javascript",
    ".jsx": "javascript",
    ".py": "python",
    ".java": "java",
    ".cs": "csharp",
}

# Languages the tree-sitter TypeScript grammars can parse for AST rules.
AST_LANGUAGES = frozenset({"typescript", "javascript"})


def classify(path: Union[str, Path]) -> str:
    """
    Return the language tag for a path, or "unknown".

    Matching is on the exact (case-sensitive) suffix:

        >>> classify("src/app.tsx")
        'typescript'
        >>> classify("notes.txt")
        'unknown'
    """
    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix, UNKNOWN)


def reviewable_extensions() -> frozenset[str]:
    """Extensions the workspace traversal collects for review."""
    return frozenset(LANGUAGE_BY_EXTENSION)
