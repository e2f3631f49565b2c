# Missing null/undefined check detection: flags function parameters that are never
# compared against null or undefined in an `if` condition inside the function body.

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterator

from tree_sitter import Node as TSNode
from tree_sitter import Tree

from coderev.context import ScanContext
from coderev.findings.models import Finding, Severity
from coderev.languages import AST_LANGUAGES
from coderev.parser import SourceParseError, create_parser, parse_source
from coderev.rules.base import Evaluator
from coderev.rules.models import ENSURE_NULL_CHECK, AstRule, RuleKind

logger = logging.getLogger(__name__)

NULL_CHECK_RULE_ID = "C2"

# Function-like nodes; "function" is the older grammar name of function_expression.
FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

PARAMETER_TYPES = frozenset({"required_parameter", "optional_parameter"})

# Method keywords that make a method_definition a get/set accessor.
ACCESSOR_KEYWORDS = frozenset({"get", "set"})

COMPARISON_OPERATORS = ("===", "!==", "==", "!=")
NULL_LITERALS = ("null", "undefined")


def _walk(node: TSNode) -> Iterator[TSNode]:
    """Yield every descendant of node in document order (DFS)."""
    yield node
    for child in node.children:
        yield from _walk(child)


def node_text(source: bytes, node: TSNode) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


@lru_cache(maxsize=256)
def guard_pattern(name: str) -> re.Pattern[str]:
    """
    Regex for `name OP literal`, e.g. `x != null` or `x === undefined`.

    The name must stand alone: `xy != null` and `obj.x != null` do not count.
    """
    ops = "|".join(re.escape(op) for op in COMPARISON_OPERATORS)
    literals = "|".join(NULL_LITERALS)
    return re.compile(rf"(?<![\w$.]){re.escape(name)}\s*(?:{ops})\s*(?:{literals})(?![\w$])")


def has_null_guard(node: TSNode, source: bytes, name: str) -> bool:
    """True if any `if` condition under node compares `name` with null/undefined."""
    if node.type == "if_statement":
        condition = node.child_by_field_name("condition")
        if condition is not None and guard_pattern(name).search(node_text(source, condition)):
            return True
    return any(has_null_guard(child, source, name) for child in node.children)


def _simple_identifier(param: TSNode) -> TSNode | None:
    """
    Return the identifier node of a plain parameter, or None.

    Destructured, rest and `this` parameters have no single name and are skipped.
    """
    if param.type == "identifier":
        return param
    if param.type in PARAMETER_TYPES:
        pattern = param.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "identifier":
            return pattern
        return None
    if param.type == "assignment_pattern":
        left = param.child_by_field_name("left")
        if left is not None and left.type == "identifier":
            return left
    return None


def is_plain_method(node: TSNode, source: bytes) -> bool:
    """False for constructors and get/set accessors, which are not checked."""
    name = node.child_by_field_name("name")
    if name is not None and node_text(source, name) == "constructor":
        return False
    # The keyword is an anonymous token; a method named `get` is a named identifier
    return not any(
        not child.is_named and child.type in ACCESSOR_KEYWORDS for child in node.children
    )


def parameter_identifiers(function: TSNode) -> list[TSNode]:
    """Identifier nodes of a function's simple parameters, in declaration order."""
    # Arrow shorthand: `x => x + 1`
    single = function.child_by_field_name("parameter")
    if single is not None:
        return [single] if single.type == "identifier" else []

    params = function.child_by_field_name("parameters")
    if params is None:
        return []
    identifiers = []
    for param in params.named_children:
        ident = _simple_identifier(param)
        if ident is not None:
            identifiers.append(ident)
    return identifiers


def find_unguarded_parameters(tree: Tree, source: bytes) -> list[tuple[TSNode, str]]:
    """
    Return (identifier node, name) for every unguarded parameter in the tree.

    Functions are visited in document order; each one is judged on its own
    body, so an outer guard never covers an inner function's parameter.
    """
    unguarded: list[tuple[TSNode, str]] = []
    for node in _walk(tree.root_node):
        # is_named excludes the anonymous `function` keyword token
        if not node.is_named or node.type not in FUNCTION_TYPES:
            continue
        if node.type == "method_definition" and not is_plain_method(node, source):
            continue
        body = node.child_by_field_name("body")
        if body is None:
            continue
        for ident in parameter_identifiers(node):
            name = node_text(source, ident)
            if not has_null_guard(body, source, name):
                unguarded.append((ident, name))
    return unguarded


def scan_null_checks(context: ScanContext) -> list[Finding]:
    """
    Parse the file and report one C2 finding per unguarded parameter.

    Raises:
        SourceParseError: if the text does not parse cleanly.
    """
    source = context.text.encode("utf-8", errors="surrogatepass")
    tree = parse_source(source, path=context.path, parser=create_parser(context.path))

    findings: list[Finding] = []
    for ident, name in find_unguarded_parameters(tree, source):
        offset = len(source[: ident.start_byte].decode("utf-8", errors="surrogatepass"))
        line, snippet = context.locate(offset)
        findings.append(
            Finding(
                rule_id=NULL_CHECK_RULE_ID,
                description=f"Parameter '{name}' missing null/undefined check",
                severity=Severity.WARNING,
                auto_fixable=True,
                file=context.path,
                line=line,
                snippet=snippet,
                match=name,
                language=context.language,
            )
        )
    logger.debug("Null-check scan of %s: %d finding(s)", context.path, len(findings))
    return findings


class NullChecksEvaluator(Evaluator):
    """AST rules; only the ensure_null_check sub-rule is implemented."""

    kind = RuleKind.AST

    def run(self, context: ScanContext, rule: AstRule) -> list[Finding]:
        if rule.rule != ENSURE_NULL_CHECK:
            logger.debug("Unknown AST rule %r in %s; skipped", rule.rule, rule.identity)
            return []
        if context.language not in AST_LANGUAGES or not rule.applies_to(context.language):
            return []
        try:
            return scan_null_checks(context)
        except SourceParseError as e:
            logger.warning("AST rule %s skipped: %s", rule.identity, e)
            return []
