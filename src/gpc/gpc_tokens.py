"""
Terminal definitions and classified tokens consumed by the gpc parser.

Tokenization itself happens upstream; this module only models its output and
provides loaders for the JSON files the command line accepts.

Classes:
    TokenDefinition: A terminal category name plus the pattern the tokenizer uses.
    Token: A single classified token with name, value, and optional location.

Functions:
    load_terminals(path): Load terminal definitions from a JSON file.
    load_tokens(path): Load a classified token sequence from a JSON file.

Accepted terminal file shapes:
    ["NUM", "PLUS"]
    [{"name": "NUM", "pattern": "[0-9]+"}, {"name": "PLUS", "pattern": "\\+"}]
    {"NUM": "[0-9]+", "PLUS": "\\+"}

Accepted token file shapes:
    [{"name": "NUM", "value": "1"}, {"name": "PLUS", "value": "+", "line": 1, "col": 3}]
    [["NUM", "1"], ["PLUS", "+"]]

Example:
    >>> terminals = [TokenDefinition("NUM"), TokenDefinition("PLUS")]
    >>> tokens = [Token("NUM", "1"), Token("PLUS", "+"), Token("NUM", "2")]
"""

import json
import logging
from pathlib import Path
from typing import Any

from gpc.gpc_errors import ConfigError

logger = logging.getLogger(__name__)


class TokenDefinition:
    """A terminal symbol definition supplied by the tokenizer.

    Attributes:
        name (str): The token category name referenced from grammar productions.
        pattern (str): The recognition pattern used by the tokenizer. Never read
            by the parser.
    """

    def __init__(self, name: str, pattern: str = ""):
        self.name = name
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"TokenDefinition({self.name}, {self.pattern!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, TokenDefinition)
            and self.name == other.name
            and self.pattern == other.pattern
        )

    def __hash__(self) -> int:
        return hash((self.name, self.pattern))


class Token:
    """Represents a single classified token.

    Attributes:
        name (str): The token category; must match a TokenDefinition name.
        value (str): The literal text of the token.
        line (int): The 1-based line number where the token appears, or 0.
        col (int): The 1-based column number where the token starts, or 0.
    """

    def __init__(self, name: str, value: str, line: int = 0, col: int = 0):
        """Initializes a new Token instance.

        Args:
            name (str): The token's category name.
            value (str): The literal value of the token.
            line (int, optional): The line number (default is 0).
            col (int, optional): The column number (default is 0).
        """
        self.name = name
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.name}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.name == other.name
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.name, self.value, self.line, self.col))


def _read_json(path: str | Path, what: str) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load {what} file {path}: {e}") from e


def _is_position(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def load_terminals(path: str | Path) -> list[TokenDefinition]:
    """Loads terminal definitions from a JSON file.

    Args:
        path: Path to a JSON file holding a list of names, a list of
            ``{"name", "pattern"}`` objects, or an object mapping names to patterns.

    Returns:
        The terminal definitions in file order.

    Raises:
        ConfigError: If the file cannot be read or has an unsupported shape.
    """
    data = _read_json(path, "terminals")
    definitions: list[TokenDefinition] = []

    if isinstance(data, dict):
        for name, pattern in data.items():
            definitions.append(TokenDefinition(str(name), str(pattern)))
    elif isinstance(data, list):
        for entry in data:
            if isinstance(entry, str):
                definitions.append(TokenDefinition(entry))
            elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
                definitions.append(
                    TokenDefinition(entry["name"], str(entry.get("pattern", "")))
                )
            else:
                raise ConfigError(f"Invalid terminal definition: {entry!r}")
    else:
        raise ConfigError("Terminals file must hold a list or an object")

    logger.debug("Loaded %d terminal definitions from %s", len(definitions), path)
    return definitions


def load_tokens(path: str | Path) -> list[Token]:
    """Loads a classified token sequence from a JSON file.

    Args:
        path: Path to a JSON list of ``{"name", "value"}`` objects (with optional
            ``line`` and ``col``) or of ``[name, value]`` pairs.

    Returns:
        The tokens in file order.

    Raises:
        ConfigError: If the file cannot be read or an entry is malformed.
    """
    data = _read_json(path, "tokens")
    if not isinstance(data, list):
        raise ConfigError("Tokens file must hold a list")

    tokens: list[Token] = []
    for entry in data:
        if isinstance(entry, dict) and "name" in entry and "value" in entry:
            line = entry.get("line", 0)
            col = entry.get("col", 0)
            if not (_is_position(line) and _is_position(col)):
                raise ConfigError(f"Invalid token entry: {entry!r}")
            tokens.append(Token(str(entry["name"]), str(entry["value"]), line, col))
        elif isinstance(entry, list) and len(entry) == 2:
            tokens.append(Token(str(entry[0]), str(entry[1])))
        else:
            raise ConfigError(f"Invalid token entry: {entry!r}")

    logger.debug("Loaded %d tokens from %s", len(tokens), path)
    return tokens


__all__ = ["Token", "TokenDefinition", "load_terminals", "load_tokens"]
