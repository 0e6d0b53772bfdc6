"""
gpc Backtracking Derivation Engine

Derives a classified token sequence from the start symbol of a loaded grammar
and returns the parse tree that witnesses the derivation.

Algorithm
---------
- A terminal symbol matches iff the token at the current index has the same
  name; the match yields a leaf carrying the token value and advances by one.
- A non-terminal tries its alternatives in declaration order. Each member of
  an alternative is derived left to right, threading the token index. The
  first member that fails abandons the whole alternative.
- The first alternative whose members all succeed is accepted. Later
  alternatives are never tried, even if one of them would have let an
  enclosing rule succeed.
- The outermost goal must also consume every token: an alternative that
  leaves tokens over is rejected and the next alternative is tried. Nested
  occurrences of the start symbol are not held to this.

There is no memoization, so the worst case is exponential in the number of
tokens. Recursion uses the Python call stack; left-recursive grammars raise
RecursionError.

Entry Points
------------
- `Parser(tokens, rules, start_symbol).parse()`: Derive a whole token sequence.
- `Parser.try_derive(symbol, index)`: Derive one symbol at one position.
- `derive(tokens, rules, start_symbol)`: Functional form of `Parser.parse()`.
- `parse(terminals, tokens, grammar_path)`: Load a grammar file and derive.

Raises
------
DerivationFailure
    When no alternative of the start symbol derives the full token sequence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from gpc.gpc_errors import DerivationFailure
from gpc.gpc_grammar import GrammarSymbol, Production, RuleTable, load_grammar
from gpc.gpc_tokens import Token, TokenDefinition
from gpc.gpc_tree import ParseNode, ParseTree

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive backtracking parser over a read-only rule table.

    The parser holds no mutable state: the token sequence, rule table, and
    start symbol are fixed at construction, and every call to `try_derive`
    builds its own child lists. One instance may be parsed repeatedly.

    Attributes
    ----------
    tokens : Sequence[Token]
        The classified token sequence to derive.
    rules : RuleTable
        Non-terminal name to its alternatives, in declaration order.
    start_symbol : GrammarSymbol
        The goal of the whole derivation.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        rules: RuleTable,
        start_symbol: GrammarSymbol,
    ) -> None:
        self.tokens: Sequence[Token] = tokens
        self.rules: RuleTable = rules
        self.start_symbol: GrammarSymbol = start_symbol

    def parse(self) -> ParseTree:
        """Derives the whole token sequence from the start symbol.

        Returns:
            The parse tree rooted at the start symbol.

        Raises:
            DerivationFailure: If no derivation consumes every token.
        """
        logger.debug(
            "Deriving %d tokens from %s", len(self.tokens), self.start_symbol.name
        )
        tree, _ = self.try_derive(self.start_symbol, 0, is_goal=True)
        if tree is None:
            raise DerivationFailure("Could not create parse tree")
        logger.debug("Derived parse tree for %s", self.start_symbol.name)
        return tree

    def try_derive(
        self, symbol: GrammarSymbol, index: int, is_goal: bool = False
    ) -> tuple[ParseTree | None, int]:
        """Attempts to derive `symbol` starting at token `index`.

        Args:
            symbol: The grammar symbol to derive.
            index: Position of the first token available to the symbol.
            is_goal: True only for the outermost derivation; the accepted
                alternative must then end exactly at the end of the input.

        Returns:
            ``(tree, next_index)`` on success, ``(None, index)`` on failure.
        """
        if symbol.is_terminal:
            return self._match_terminal(symbol, index)

        for production in self.rules.get(symbol.name, ()):
            children, end = self._derive_production(production, index)
            if children is None:
                continue
            if is_goal and end != len(self.tokens):
                continue
            node = ParseNode(symbol.name, symbol.name, False)
            return ParseTree(node, children), end

        return None, index

    def _match_terminal(
        self, symbol: GrammarSymbol, index: int
    ) -> tuple[ParseTree | None, int]:
        if index >= len(self.tokens):
            return None, index
        token = self.tokens[index]
        if token.name != symbol.name:
            return None, index
        return ParseTree(ParseNode(token.name, token.value, True)), index + 1

    def _derive_production(
        self, production: Production, index: int
    ) -> tuple[list[ParseTree] | None, int]:
        children: list[ParseTree] = []
        position = index
        for member in production:
            child, position = self.try_derive(member, position)
            if child is None:
                return None, index
            children.append(child)
        return children, position


def derive(
    tokens: Sequence[Token], rules: RuleTable, start_symbol: GrammarSymbol
) -> ParseTree:
    """Derives `tokens` from `start_symbol` under `rules`.

    Raises:
        DerivationFailure: If no derivation consumes every token.
    """
    return Parser(tokens, rules, start_symbol).parse()


def parse(
    terminals: Iterable[TokenDefinition],
    tokens: Sequence[Token],
    grammar_path: str | Path,
) -> ParseTree:
    """Loads the grammar at `grammar_path` and derives `tokens` with it.

    Raises:
        ConfigError: If the grammar cannot be loaded or fails validation.
        DerivationFailure: If no derivation consumes every token.
    """
    grammar = load_grammar(grammar_path, terminals)
    return derive(tokens, grammar.rules, grammar.start_symbol)


__all__ = ["Parser", "derive", "parse"]
