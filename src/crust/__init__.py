"""crust language lexer and Pratt parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crust.ast import Program
    from crust.tokens import IdentifierRules

__version__ = "0.1.0"


def parse(
    source: str,
    filename: str = "input.crust",
    identifiers: IdentifierRules | None = None,
) -> Program:
    """Parse crust source into a Program, raising ParseFailed on syntax errors.

    *identifiers* defaults to the alphabetic-only rules.
    """
    from crust.parser import parse as _parse
    from crust.tokens import ALPHA

    return _parse(source, filename, identifiers or ALPHA)
