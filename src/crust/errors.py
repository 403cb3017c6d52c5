"""Error types with formatted source context."""

from __future__ import annotations

from crust.tokens import Span


def _render(message: str, span: Span, source: str, filename: str) -> str:
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        underline_len = max(1, span.end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(span.start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{span.start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class ParseError(Exception):
    """A syntax error found by the parser, with span and source context.

    The parser collects these rather than raising them, so one input can
    report several problems.
    """

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(message)

    def format(self, filename: str = "input.crust") -> str:
        return _render(self.message, self.span, self.source, filename)


class ParseFailed(Exception):
    """Raised by parse() when the parser collected one or more errors."""

    def __init__(self, errors: list[ParseError], filename: str = "input.crust") -> None:
        self.errors = errors
        self.filename = filename
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        name = filename if filename is not None else self.filename
        return "\n\n".join(err.format(name) for err in self.errors)
