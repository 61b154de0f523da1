# parser/lexer.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# Lexical analyzer for input value shapes using SLY

"""Lexical analyzer for the value clause of input event lines.

Tokenizes ``?``, ``?:Integer`` and ``?:{size:Integer; name:String}``.

Supported Tokens:
- Punctuation: ?, :, {, }, ;
- Names: field names and type names
- Whitespace: ignored during tokenization
"""

from sly import Lexer

from utils.logger import get_logger
from .exceptions import ParseError


class ShapeLexer(Lexer):
    """SLY-based lexer for value shape clauses.

    Attributes:
        tokens: Set of valid token types
        ignore: Characters to skip during tokenization
    """

    tokens = {
        "QUESTION",
        "COLON",
        "LBRACE",
        "RBRACE",
        "SEMI",
        "NAME",
    }

    ignore = " \t"

    QUESTION = r"\?"
    COLON = r":"
    LBRACE = r"\{"
    RBRACE = r"\}"
    SEMI = r";"

    NAME = r"[A-Za-z_][A-Za-z0-9_]*"

    def error(self, t):
        """Handle illegal characters during tokenization.

        Args:
            t: SLY token object containing error context

        Raises:
            ParseError: Always raised with character and position information
        """
        illegal_char = t.value[0]
        error_pos = self.index
        get_logger().debug(f"Illegal character '{illegal_char}' at position {error_pos}")

        self.index += 1
        raise ParseError(
            f"Illegal character '{illegal_char}' in value shape at position {error_pos}"
        )
