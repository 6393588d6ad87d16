"""
Syntax Analyzer - counts loops, nesting, self-recursion and literal allocations.
Parses JS/TS-family sources with tree-sitter; everything else, and anything
that fails to parse, goes through a keyword count.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from co2de_meter import rules
from co2de_meter.models import AnalysisBranch, RawCounts

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())
TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())
TSX_LANGUAGE = Language(tree_sitter_typescript.language_tsx())

# The javascript grammar includes JSX
GRAMMARS = {
    "ts": TS_LANGUAGE,
    "tsx": TSX_LANGUAGE,
}

# for_in_statement covers for-in, for-of and for-await
LOOP_TYPES = frozenset({
    "for_statement",
    "for_in_statement",
    "while_statement",
    "do_statement",
})

# Loops counted inside a function body for the nesting bonus
FUNCTION_LOOP_TYPES = frozenset({
    "for_statement",
    "for_in_statement",
    "while_statement",
})

FUNCTION_DECLARATION_TYPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
})

ALLOCATION_TYPES = frozenset({"array", "object"})

_KEYWORD_PATTERN = re.compile(
    r"\b(" + "|".join(rules.REGEX_LOOP_KEYWORDS) + r")\b"
)


@dataclass(frozen=True)
class ParseOutcome:
    """Either a syntax tree or the error that prevented building one."""

    tree: Optional[Tree] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.tree is not None


def walk(node: Node) -> Iterator[Node]:
    """Yield node and all of its descendants in document order."""
    cursor = node.walk()
    while True:
        yield cursor.node
        if cursor.goto_first_child():
            continue
        if cursor.goto_next_sibling():
            continue
        while True:
            if not cursor.goto_parent():
                return
            if cursor.goto_next_sibling():
                break


def node_text(node: Optional[Node]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    return node.text.decode("utf-8", errors="replace")


def member_property(node: Optional[Node]) -> Optional[str]:
    """Property name of a dotted member access, `a.b` or `a?.b` -> 'b'."""
    if node is None or node.type != "member_expression":
        return None
    return node_text(node.child_by_field_name("property"))


def callee_name(call: Node) -> Optional[str]:
    """Name a call expression invokes: `f()` -> 'f', `obj.f()` -> 'f'."""
    callee = call.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        return node_text(callee)
    return member_property(callee)


def _first_error(tree: Tree) -> str:
    for node in walk(tree.root_node):
        if node.is_missing:
            return f"missing {node.type} on line {node.start_point[0] + 1}"
        if node.is_error:
            return f"unexpected input on line {node.start_point[0] + 1}"
    return "syntax error"


def parse_source(content: str, language: str = rules.DEFAULT_LANGUAGE) -> ParseOutcome:
    """Parse content with the grammar for its language. Never raises."""
    parser = Parser(GRAMMARS.get(language, JS_LANGUAGE))
    tree = parser.parse(content.encode("utf-8", errors="replace"))
    if tree.root_node.has_error:
        return ParseOutcome(error=_first_error(tree))
    return ParseOutcome(tree=tree)


class EnergyASTVisitor:
    """
    Walks a tree-sitter tree once and keeps the running counters.
    Dispatches on node.type to visit_<type> methods.
    """

    def __init__(self):
        self.loop_count = 0.0
        self.nested_loop_bonus = 0.0
        self.recursion_bonus = 0.0
        self.allocation_count = 0.0
        self.recursion_detected = False

    def visit(self, node: Node) -> None:
        method = getattr(self, f"visit_{node.type}", None)
        if method is not None:
            method(node)
        else:
            self.generic_visit(node)

    def generic_visit(self, node: Node) -> None:
        for child in node.named_children:
            self.visit(child)

    def _visit_loop(self, node: Node) -> None:
        self.loop_count += rules.LOOP_WEIGHT
        self.generic_visit(node)

    visit_for_statement = _visit_loop
    visit_for_in_statement = _visit_loop
    visit_while_statement = _visit_loop
    visit_do_statement = _visit_loop

    def visit_call_expression(self, node: Node) -> None:
        method = member_property(node.child_by_field_name("function"))
        if method in rules.HIGHER_ORDER_METHODS:
            self.loop_count += rules.HIGHER_ORDER_CALL_WEIGHT
        self.generic_visit(node)

    def visit_function_declaration(self, node: Node) -> None:
        name = node_text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        if name and body is not None:
            self._check_nested_loops(body)
            self._check_recursion(body, name)
        self.generic_visit(node)

    visit_generator_function_declaration = visit_function_declaration

    def visit_variable_declarator(self, node: Node) -> None:
        value = node.child_by_field_name("value")
        if value is not None and value.type in ALLOCATION_TYPES:
            self.allocation_count += rules.ALLOCATION_WEIGHT
        self.generic_visit(node)

    def _check_nested_loops(self, body: Node) -> None:
        loops = sum(1 for child in walk(body) if child.type in FUNCTION_LOOP_TYPES)
        if loops > 1:
            self.nested_loop_bonus += rules.NESTED_LOOP_BONUS

    def _check_recursion(self, body: Node, name: str) -> None:
        """Detect a call to the function's own name, bare or as a property."""
        for child in walk(body):
            if child.type == "call_expression" and callee_name(child) == name:
                self.recursion_detected = True
                self.recursion_bonus += rules.RECURSION_BONUS
                return

    def counts(self) -> RawCounts:
        return RawCounts(
            loop_count=self.loop_count,
            nested_loop_bonus=self.nested_loop_bonus,
            recursion_bonus=self.recursion_bonus,
            allocation_count=self.allocation_count,
            recursion_detected=self.recursion_detected,
            branch=AnalysisBranch.AST,
        )


def count_loop_keywords(content: str) -> int:
    """Pooled count of loop and iteration keywords."""
    return len(_KEYWORD_PATTERN.findall(content))


class SyntaxAnalyzer:
    """
    Produces RawCounts for a source text. The AST branch is used for
    parseable JS/TS-family sources, the keyword branch for everything else.
    """

    def __init__(self, ast_languages=rules.AST_LANGUAGES):
        self.ast_languages = ast_languages

    def analyze(self, content: str, language: str) -> RawCounts:
        if language not in self.ast_languages:
            logger.debug("language %s has no parser, using keyword count", language)
            return self.analyze_keywords(content)

        outcome = parse_source(content, language)
        if not outcome.ok:
            logger.debug("parse failed (%s), using keyword count", outcome.error)
            return self.analyze_keywords(content)

        visitor = EnergyASTVisitor()
        try:
            visitor.visit(outcome.tree.root_node)
        except RecursionError:
            logger.debug("syntax tree too deep to walk, using keyword count")
            return self.analyze_keywords(content)
        return visitor.counts()

    def analyze_keywords(self, content: str) -> RawCounts:
        return RawCounts(
            loop_count=float(count_loop_keywords(content)),
            branch=AnalysisBranch.REGEX,
        )
