"""
Grammar loading and validation for the gpc syntax analyzer.

Grammar Format
--------------
The grammar is a line-oriented text file. Every line is whitespace-trimmed,
and a line left empty after trimming separates blocks::

    Expr
    Term PLUS Expr
    Term

    Term
    NUM

- The first line of a block names a non-terminal.
- Every following line of the block is one alternative production, written
  as symbol names separated by single spaces.
- The non-terminal of the first block is the start symbol.
- A symbol is a terminal iff its name matches a terminal definition name;
  otherwise it must be declared as a non-terminal somewhere in the file.

Alternatives keep their declaration order: the parser tries them in that
order and commits to the first one that succeeds.

Policies
--------
- Declaring the same non-terminal in two blocks raises ConfigError.
- A block with a header and no alternatives is accepted (and logged); that
  non-terminal never derives anything.
- A file with no blocks raises ConfigError.

Entry Points
------------
- `load_grammar(path, terminals)`: Load a grammar file.
- `parse_grammar(text, terminals)`: Load a grammar from a string.
- `read_grammar(lines, terminals)`: Load a grammar from any iterable of lines.

Raises
------
ConfigError
    When the grammar cannot be read, is empty, redeclares a non-terminal, or
    references a symbol that is neither a non-terminal nor a terminal.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from gpc.gpc_errors import ConfigError
from gpc.gpc_tokens import TokenDefinition

logger = logging.getLogger(__name__)


class GrammarSymbol:
    """A symbol referenced by a grammar production.

    Two symbols are equal iff their names are equal. Whether the symbol is a
    terminal is decided once when the grammar is loaded; both attributes are
    read-only afterwards.

    Attributes:
        name (str): The symbol name as written in the grammar.
        is_terminal (bool): True if the name matches a terminal definition.
    """

    __slots__ = ("_name", "_is_terminal")

    def __init__(self, name: str, is_terminal: bool = False):
        self._name = name
        self._is_terminal = is_terminal

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_terminal(self) -> bool:
        return self._is_terminal

    def __repr__(self) -> str:
        return f"GrammarSymbol({self.name}, terminal={self.is_terminal})"

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, GrammarSymbol) and self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)


Production = tuple[GrammarSymbol, ...]
"""One alternative: the ordered right-hand side of a rule."""

RuleTable = Mapping[str, tuple[Production, ...]]
"""Read-only mapping from non-terminal name to its alternatives, in order."""


class Grammar:
    """A loaded and validated grammar.

    Attributes:
        rules (RuleTable): Non-terminal name to ordered alternatives. Read-only.
        start_symbol (GrammarSymbol): The non-terminal of the first block.
        terminal_names (frozenset[str]): Names of all known terminals.
    """

    def __init__(
        self,
        rules: RuleTable,
        start_symbol: GrammarSymbol,
        terminal_names: frozenset[str],
    ) -> None:
        self.rules = rules
        self.start_symbol = start_symbol
        self.terminal_names = terminal_names

    def __repr__(self) -> str:
        return (
            f"Grammar(start={self.start_symbol.name}, "
            f"nonterminals={len(self.rules)}, terminals={len(self.terminal_names)})"
        )

    def nonterminals(self) -> list[str]:
        """Returns the non-terminal names in declaration order."""
        return list(self.rules)


def _terminal_names(terminals: Iterable[TokenDefinition]) -> frozenset[str]:
    return frozenset(definition.name for definition in terminals)


def _build_rules(
    lines: Iterable[str], terminal_names: frozenset[str]
) -> tuple[dict[str, list[Production]], str | None]:
    rules: dict[str, list[Production]] = {}
    first: str | None = None
    current: str | None = None

    for raw in lines:
        line = raw.strip()

        if line == "":
            current = None
            continue

        if current is None:
            # Block header
            if line in rules:
                raise ConfigError(
                    f"Non-terminal declared in more than one block: {line}",
                    symbol=line,
                )
            current = line
            rules[current] = []
            if first is None:
                first = current
        else:
            production = tuple(
                GrammarSymbol(name, name in terminal_names) for name in line.split(" ")
            )
            rules[current].append(production)

    return rules, first


def _validate(
    rules: Mapping[str, Iterable[Production]], terminal_names: frozenset[str]
) -> None:
    for alternatives in rules.values():
        for production in alternatives:
            for symbol in production:
                if symbol.name in rules or symbol.name in terminal_names:
                    continue
                raise ConfigError(
                    f"Unknown symbol in grammar: {symbol.name}", symbol=symbol.name
                )


def read_grammar(lines: Iterable[str], terminals: Iterable[TokenDefinition]) -> Grammar:
    """Builds and validates a grammar from an iterable of text lines.

    Args:
        lines: Grammar source lines, with or without trailing newlines.
        terminals: The terminal definitions known to the tokenizer.

    Returns:
        The validated Grammar.

    Raises:
        ConfigError: If the grammar is empty, redeclares a non-terminal, or
            references an unknown symbol.
    """
    terminal_names = _terminal_names(terminals)
    rules, first = _build_rules(lines, terminal_names)

    if first is None:
        raise ConfigError("Grammar declares no non-terminals")

    _validate(rules, terminal_names)

    for name, alternatives in rules.items():
        if not alternatives:
            logger.warning("Non-terminal %s has no productions", name)

    table: RuleTable = MappingProxyType(
        {name: tuple(alternatives) for name, alternatives in rules.items()}
    )
    start = GrammarSymbol(first, False)
    logger.debug(
        "Loaded grammar with %d non-terminals, start symbol %s", len(table), first
    )
    return Grammar(table, start, terminal_names)


def parse_grammar(text: str, terminals: Iterable[TokenDefinition]) -> Grammar:
    """Builds and validates a grammar from its source text."""
    return read_grammar(text.splitlines(), terminals)


def load_grammar(path: str | Path, terminals: Iterable[TokenDefinition]) -> Grammar:
    """Reads, builds, and validates a grammar file.

    Args:
        path: Path to the grammar file (UTF-8).
        terminals: The terminal definitions known to the tokenizer.

    Returns:
        The validated Grammar.

    Raises:
        ConfigError: If the file cannot be opened or the grammar is invalid.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return read_grammar(f, terminals)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to open grammar file with path {path}: {e}") from e


__all__ = [
    "Grammar",
    "GrammarSymbol",
    "Production",
    "RuleTable",
    "load_grammar",
    "parse_grammar",
    "read_grammar",
]
