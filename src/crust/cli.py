"""Command-line interface for crust: interactive loop and file mode."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from crust.tokens import ALPHA, IDENTIFIER_STYLES, IdentifierRules, TokenType

GREETING = "Welcome to the crust programming language!"
DEFAULT_PROMPT = ">> "
MODES = ("tokens", "ast")


class ConfigError(Exception):
    """Invalid value in the config file or on the command line."""


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    identifiers: IdentifierRules
    mode: str
    prompt: str
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="crust",
        description="crust language lexer and parser",
    )
    p.add_argument("input", nargs="?", help="Source file (default: interactive loop)")
    p.add_argument(
        "--tokens",
        action="store_true",
        default=None,
        help="Print the token stream instead of the parsed program",
    )
    p.add_argument(
        "--ast",
        dest="tokens",
        action="store_false",
        help="Print the parsed program (default for files)",
    )
    p.add_argument(
        "--identifiers",
        choices=sorted(IDENTIFIER_STYLES),
        default=None,
        help="Identifier character rules (default: alpha)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover crust.toml)",
    )
    p.add_argument(
        "--prompt",
        default=None,
        help=f"Interactive prompt (default: {DEFAULT_PROMPT!r})",
    )
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    p.set_defaults(tokens=None)
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / "crust.toml"

    if not path.is_file():
        if config_path is not None:
            raise ConfigError(f"config file not found: {config_path}")
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input) if args.input else None
    search_dir = Path(".")
    if input_file is not None and input_file.parent.parts:
        search_dir = input_file.parent

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir)

    cfg_lexer = config.get("lexer")
    cfg_repl = config.get("repl")

    # Identifier rules: config < CLI
    style = ALPHA.name
    if isinstance(cfg_lexer, dict) and "identifiers" in cfg_lexer:
        style = str(cfg_lexer["identifiers"])
    if args.identifiers is not None:
        style = args.identifiers
    if style not in IDENTIFIER_STYLES:
        choices = ", ".join(sorted(IDENTIFIER_STYLES))
        raise ConfigError(f"unknown identifier style {style!r} (expected one of: {choices})")

    # Output mode: interactive default is tokens, file default is ast
    mode = "tokens" if input_file is None else "ast"
    if isinstance(cfg_repl, dict) and "mode" in cfg_repl:
        mode = str(cfg_repl["mode"])
    if args.tokens is not None:
        mode = "tokens" if args.tokens else "ast"
    if mode not in MODES:
        raise ConfigError(f"unknown mode {mode!r} (expected one of: {', '.join(MODES)})")

    # Prompt: config < CLI
    prompt = DEFAULT_PROMPT
    if isinstance(cfg_repl, dict) and isinstance(cfg_repl.get("prompt"), str):
        prompt = cfg_repl["prompt"]
    if args.prompt is not None:
        prompt = args.prompt

    return CliOptions(
        input_file=input_file,
        identifiers=IDENTIFIER_STYLES[style],
        mode=mode,
        prompt=prompt,
        debug=args.debug,
    )


def run_source(
    source: str,
    options: CliOptions,
    filename: str,
    out: TextIO,
    err: TextIO,
) -> int:
    """Tokenize or parse one chunk of source. Returns 0, or 1 on parse errors."""
    from crust.debug import dump_ast, format_token, to_source
    from crust.lexer import Lexer
    from crust.parser import Parser

    lexer = Lexer(source, options.identifiers)

    if options.mode == "tokens":
        for tok in lexer:
            if tok.type == TokenType.EOF:
                break
            print(format_token(tok), file=out)
        return 0

    parser = Parser(lexer)
    program = parser.parse_program()

    if parser.diagnostics:
        for error in parser.diagnostics:
            print(error.format(filename), file=err)
        return 1

    if options.debug:
        dump_ast(program, file=err)

    for stmt in program.statements:
        print(to_source(stmt), file=out)
    return 0


def repl_loop(options: CliOptions, stdin: TextIO, stdout: TextIO, stderr: TextIO) -> None:
    """Read lines until end of input, handling each one independently."""
    print(GREETING, file=stdout)
    while True:
        stdout.write(options.prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return
        run_source(line, options, "<stdin>", stdout, stderr)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.input_file is None:
        repl_loop(options, sys.stdin, sys.stdout, sys.stderr)
        return 0

    try:
        source = options.input_file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: cannot read {options.input_file}: {exc.strerror}", file=sys.stderr)
        return 2

    return run_source(source, options, str(options.input_file), sys.stdout, sys.stderr)
