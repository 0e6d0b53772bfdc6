"""
Error hierarchy for the gpc syntax analyzer.

Both phases of a parse fail through exceptions rather than by terminating the
process, so the host decides whether to abort, retry with another grammar, or
report the problem.

Classes:
    GpcError: Base class for every error raised by gpc.
    ConfigError: Raised while loading grammar, terminal, or token inputs.
    DerivationFailure: Raised when the token sequence does not derive from the
        start symbol.
"""


class GpcError(Exception):
    """Base class for all gpc errors."""


class ConfigError(GpcError):
    """Raised when a grammar or one of its inputs cannot be loaded.

    Covers unreadable grammar files, duplicate non-terminal blocks, empty
    grammars, malformed terminal or token files, and symbols that resolve to
    neither a non-terminal nor a terminal.

    Attributes:
        symbol (str | None): The offending symbol name, when the error was
            caused by a single unresolvable or duplicated symbol.

    Example:
        raise ConfigError("Unknown symbol in grammar: FOO", symbol="FOO")
    """

    def __init__(self, message: str, symbol: str | None = None):
        super().__init__(message)
        self.symbol = symbol


class DerivationFailure(GpcError):
    """Raised when no production of the start symbol derives the whole input.

    Carries no positional information: the engine only knows that every
    alternative was exhausted.
    """


__all__ = ["ConfigError", "DerivationFailure", "GpcError"]
