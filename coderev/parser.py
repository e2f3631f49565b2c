# Tree-sitter setup and AST parsing: parse TypeScript/JavaScript source into AST trees.

import logging
from pathlib import Path
from typing import Optional, Union

import tree_sitter
from tree_sitter import Language
from tree_sitter import Node as TSNode
from tree_sitter_typescript import language_tsx as _tsx_language_capsule
from tree_sitter_typescript import language_typescript as _ts_language_capsule

logger = logging.getLogger(__name__)

_TYPESCRIPT_LANGUAGE = Language(_ts_language_capsule())
_TSX_LANGUAGE = Language(_tsx_language_capsule())

# JSX syntax only parses with the TSX grammar; plain .js files may carry JSX too.
TSX_SUFFIXES = frozenset({".tsx", ".js", ".jsx"})


class SourceParseError(Exception):
    """Source text could not be parsed without syntax errors."""

    def __init__(self, path: Optional[Path], line: Optional[int] = None) -> None:
        self.path = path
        self.line = line
        where = f"{path}:{line}" if line is not None else str(path)
        super().__init__(f"Syntax error in {where}")


def get_language(path: Union[str, Path, None] = None) -> Language:
    """Return the grammar for a path: TSX for .tsx/.js/.jsx, TypeScript otherwise."""
    if path is not None and Path(path).suffix in TSX_SUFFIXES:
        return _TSX_LANGUAGE
    return _TYPESCRIPT_LANGUAGE


def create_parser(path: Union[str, Path, None] = None) -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for the path's grammar."""
    return tree_sitter.Parser(get_language(path))


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse source bytes into an AST.

    Args:
        source: UTF-8 encoded TypeScript/JavaScript source.
        parser: Optional parser instance; if None, a TypeScript one is created.

    Returns:
        The parse tree. Check tree.root_node.has_error for syntax errors.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.debug("Parse completed with errors: root=%s", tree.root_node.type)
    else:
        logger.debug("Parse succeeded: root=%s", tree.root_node.type)
    return tree


def _first_error(node: TSNode) -> Optional[TSNode]:
    """Return the first ERROR or MISSING node in document order."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_source(
    source: bytes,
    path: Union[str, Path, None] = None,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse source and require a clean tree.

    Raises:
        SourceParseError: if the tree contains ERROR or MISSING nodes.
    """
    if parser is None:
        parser = create_parser(path)
    tree = parse_bytes(source, parser=parser)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        line = None
        if bad is not None:
            row, _ = bad.start_point
            line = row + 1
        raise SourceParseError(Path(path) if path is not None else None, line)
    return tree
