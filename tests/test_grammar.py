import logging
from pathlib import Path

import pytest

from gpc.gpc_errors import ConfigError
from gpc.gpc_grammar import (
    GrammarSymbol,
    load_grammar,
    parse_grammar,
    read_grammar,
)
from gpc.gpc_tokens import TokenDefinition


def terminals(*names: str) -> list[TokenDefinition]:
    return [TokenDefinition(name) for name in names]


EXPR_GRAMMAR = """\
Expr
Term PLUS Expr
Term

Term
NUM
LPAREN Expr RPAREN
"""

EXPR_TERMINALS = terminals("NUM", "PLUS", "LPAREN", "RPAREN")


def names(production: tuple[GrammarSymbol, ...]) -> list[str]:
    return [s.name for s in production]


def test_symbol_equality_by_name_only() -> None:
    assert GrammarSymbol("A", True) == GrammarSymbol("A", False)
    assert GrammarSymbol("A") != GrammarSymbol("B")
    assert hash(GrammarSymbol("A", True)) == hash(GrammarSymbol("A", False))
    assert GrammarSymbol("A") != "A"


def test_start_symbol_is_first_block() -> None:
    grammar = parse_grammar(EXPR_GRAMMAR, EXPR_TERMINALS)
    assert grammar.start_symbol == GrammarSymbol("Expr")
    assert grammar.start_symbol.is_terminal is False
    assert grammar.nonterminals() == ["Expr", "Term"]


def test_alternatives_keep_declaration_order() -> None:
    grammar = parse_grammar(EXPR_GRAMMAR, EXPR_TERMINALS)
    assert [names(p) for p in grammar.rules["Expr"]] == [
        ["Term", "PLUS", "Expr"],
        ["Term"],
    ]
    assert [names(p) for p in grammar.rules["Term"]] == [
        ["NUM"],
        ["LPAREN", "Expr", "RPAREN"],
    ]


def test_symbols_classified_at_load_time() -> None:
    grammar = parse_grammar(EXPR_GRAMMAR, EXPR_TERMINALS)
    term, plus, expr = grammar.rules["Expr"][0]
    assert term.is_terminal is False
    assert plus.is_terminal is True
    assert expr.is_terminal is False


def test_terminal_wins_over_nonterminal_name() -> None:
    grammar = parse_grammar("S\nA\n\nA\nA", terminals("A"))
    assert grammar.rules["S"][0][0].is_terminal is True


def test_rule_table_is_read_only() -> None:
    grammar = parse_grammar(EXPR_GRAMMAR, EXPR_TERMINALS)
    with pytest.raises(TypeError):
        grammar.rules["Expr"] = ()  # type: ignore[index]
    assert isinstance(grammar.rules["Expr"], tuple)


def test_whitespace_only_lines_separate_blocks() -> None:
    text = "  S  \n  A B \n   \t \nB\n  A\n"
    grammar = parse_grammar(text, terminals("A"))
    assert grammar.nonterminals() == ["S", "B"]
    assert names(grammar.rules["S"][0]) == ["A", "B"]


def test_consecutive_blank_lines() -> None:
    grammar = parse_grammar("\n\nS\nA\n\n\n\nT\nA\n\n", terminals("A"))
    assert grammar.nonterminals() == ["S", "T"]
    assert grammar.start_symbol.name == "S"


def test_crlf_line_endings() -> None:
    grammar = parse_grammar("S\r\nA B\r\n\r\nB\r\nA\r\n", terminals("A"))
    assert names(grammar.rules["S"][0]) == ["A", "B"]


def test_unknown_symbol_raises_with_name() -> None:
    with pytest.raises(ConfigError, match="Unknown symbol in grammar: FOO") as e:
        parse_grammar("Start\nA FOO", terminals("A"))
    assert e.value.symbol == "FOO"


def test_unknown_symbol_in_later_block() -> None:
    with pytest.raises(ConfigError) as e:
        parse_grammar("S\nT\n\nT\nA\nBAR", terminals("A"))
    assert e.value.symbol == "BAR"


def test_forward_reference_is_valid() -> None:
    grammar = parse_grammar("S\nLater\n\nLater\nA", terminals("A"))
    assert grammar.rules["S"][0][0].is_terminal is False


def test_double_space_yields_empty_symbol() -> None:
    with pytest.raises(ConfigError) as e:
        parse_grammar("S\nA  A", terminals("A"))
    assert e.value.symbol == ""


def test_duplicate_block_rejected() -> None:
    with pytest.raises(ConfigError, match="more than one block") as e:
        parse_grammar("S\nA\n\nS\nB", terminals("A", "B"))
    assert e.value.symbol == "S"


def test_empty_grammar_rejected() -> None:
    with pytest.raises(ConfigError, match="no non-terminals"):
        parse_grammar("\n   \n", terminals("A"))


def test_block_without_productions_warns(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="gpc.gpc_grammar"):
        grammar = parse_grammar("S\nA\n\nEmpty", terminals("A"))
    assert grammar.rules["Empty"] == ()
    assert "Empty has no productions" in caplog.text


def test_read_grammar_from_lines() -> None:
    grammar = read_grammar(iter(["S\n", "A\n"]), terminals("A"))
    assert names(grammar.rules["S"][0]) == ["A"]


def test_load_grammar_file(tmp_path: Path) -> None:
    path = tmp_path / "expr.grammar"
    path.write_text(EXPR_GRAMMAR, encoding="utf-8")
    grammar = load_grammar(path, EXPR_TERMINALS)
    assert grammar.start_symbol.name == "Expr"
    assert grammar.terminal_names == frozenset({"NUM", "PLUS", "LPAREN", "RPAREN"})


def test_load_grammar_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to open grammar file"):
        load_grammar(tmp_path / "missing.grammar", EXPR_TERMINALS)


def test_load_grammar_validation_without_derivation(tmp_path: Path) -> None:
    path = tmp_path / "bad.grammar"
    path.write_text("Start\nA FOO\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_grammar(path, terminals("A"))
    assert e.value.symbol == "FOO"


def test_grammar_repr() -> None:
    grammar = parse_grammar(EXPR_GRAMMAR, EXPR_TERMINALS)
    assert repr(grammar) == "Grammar(start=Expr, nonterminals=2, terminals=4)"


def test_load_grammar_invalid_utf8(tmp_path: Path) -> None:
    path = tmp_path / "latin1.grammar"
    path.write_bytes(b"S\n\xff\n")
    with pytest.raises(ConfigError, match="Unable to open grammar file"):
        load_grammar(path, terminals("A"))


def test_symbols_are_read_only() -> None:
    grammar = parse_grammar("S\nA", terminals("A"))
    symbol = grammar.rules["S"][0][0]
    with pytest.raises(AttributeError):
        symbol.is_terminal = False  # type: ignore[misc]
    with pytest.raises(AttributeError):
        symbol.name = "B"  # type: ignore[misc]
    assert symbol.is_terminal is True
    assert symbol.name == "A"
