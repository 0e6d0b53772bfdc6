"""
gpc CLI Entrypoint.

This module provides the command-line interface for deriving a classified token
sequence against a grammar file and printing the resulting parse tree.

Features:
    - Read the grammar from a text file and the terminals and tokens from JSON files.
    - Derive the tokens from the grammar's start symbol.
    - Print the tree as indented text or as JSON.
    - Output to console or file.

Example usage:
    gpc expr.grammar --terminals terminals.json --tokens tokens.json
    gpc expr.grammar --terminals terminals.json --tokens tokens.json --json -o tree.json
    gpc expr.grammar --terminals terminals.json --tokens tokens.json --verbose

Functions:
    run_gpc(grammar: str, terminals: str, tokens: str, as_json: bool = False,
            out: str | None = None) -> ParseTree:
        Executes the full pipeline (load → validate → derive → output).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, configures logging, and invokes run_gpc.
"""

import argparse
import json
import logging
import sys

from gpc.gpc_errors import GpcError
from gpc.gpc_grammar import load_grammar
from gpc.gpc_parser import derive
from gpc.gpc_tokens import load_terminals, load_tokens
from gpc.gpc_tree import ParseTree, format_tree

logger = logging.getLogger(__name__)


def run_gpc(
    grammar: str,
    terminals: str,
    tokens: str,
    as_json: bool = False,
    out: str | None = None,
) -> ParseTree:
    """
    Run the gpc pipeline: load inputs, derive, and print or write the tree.

    Args:
        grammar (str): Path to the grammar file.
        terminals (str): Path to the JSON terminal definitions file.
        tokens (str): Path to the JSON token sequence file.
        as_json (bool): If True, renders the tree as JSON. Defaults to False.
        out (str | None): Optional path to write the rendered tree. If None, prints to stdout.

    Returns:
        ParseTree: The derived parse tree.

    Raises:
        ConfigError: If any input cannot be loaded or the grammar is invalid.
        DerivationFailure: If the tokens do not derive from the start symbol.
    """
    # 1. Load inputs
    definitions = load_terminals(terminals)
    grammar_obj = load_grammar(grammar, definitions)
    token_list = load_tokens(tokens)

    # 2. Derive
    tree = derive(token_list, grammar_obj.rules, grammar_obj.start_symbol)

    # 3. Render
    if as_json:
        rendered = json.dumps(tree.to_dict(), indent=2)
    else:
        rendered = format_tree(tree)

    # 4. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(rendered + "\n")
        logger.info("Wrote parse tree to %s", out)
    else:
        print(rendered)

    return tree


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the gpc CLI.

    Supported flags:
        - `--terminals`: JSON file with terminal definitions (required).
        - `--tokens`: JSON file with the classified token sequence (required).
        - `--json`: Print the tree as JSON instead of indented text.
        - `-o`, `--out`: Write the tree to a file.
        - `--verbose`: Enable debug logging.

    Returns:
        int: 0 on success, 1 if loading or derivation failed.
    """
    parser = argparse.ArgumentParser(
        prog="gpc", description="Derive a token sequence against a grammar file"
    )
    parser.add_argument("grammar", help="Grammar file")
    parser.add_argument(
        "--terminals", required=True, metavar="FILE", help="Terminal definitions (JSON)"
    )
    parser.add_argument(
        "--tokens", required=True, metavar="FILE", help="Token sequence (JSON)"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_gpc(
            grammar=args.grammar,
            terminals=args.terminals,
            tokens=args.tokens,
            as_json=args.as_json,
            out=args.out,
        )
    except GpcError as e:
        print(f"gpc: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
