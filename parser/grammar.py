# parser/grammar.py
# This file is part of Regrada - A DCR Choreography Toolkit
#
# LALR(1) grammar and parser for input value shapes using SLY

"""Value shape grammar implemented with the SLY parser generator.

Grammar::

    shape  : ?
           | ? : NAME
           | ? : { }
           | ? : { fields }
    fields : field
           | fields ; field
    field  : NAME : NAME

``?:Unit`` is read as the unit shape.
"""

from typing import List

from sly import Parser

from model.shapes import Field, InputShape
from utils.logger import get_logger
from .exceptions import ParseError
from .lexer import ShapeLexer


class _ShapeParser(Parser):
    """SLY-based LALR(1) parser producing ``InputShape`` values."""

    tokens = ShapeLexer.tokens

    @_("QUESTION")
    def shape(self, p) -> InputShape:
        return InputShape.unit()

    @_("QUESTION COLON NAME")
    def shape(self, p) -> InputShape:
        return InputShape.primitive(p.NAME)

    @_("QUESTION COLON LBRACE RBRACE")
    def shape(self, p) -> InputShape:
        return InputShape.of_record(())

    @_("QUESTION COLON LBRACE fields RBRACE")
    def shape(self, p) -> InputShape:
        return InputShape.of_record(p.fields)

    @_("field")
    def fields(self, p) -> List[Field]:
        return [p.field]

    @_("fields SEMI field")
    def fields(self, p) -> List[Field]:
        return p.fields + [p.field]

    @_("NAME COLON NAME")
    def field(self, p) -> Field:
        return Field(p.NAME0, p.NAME1)

    def parse(self, text: str) -> InputShape:
        """Parse a value clause into an ``InputShape``.

        Args:
            text: Value clause such as ``?:{a:Integer; b:String}``

        Returns:
            The parsed shape

        Raises:
            ParseError: If the clause is empty or malformed
        """
        logger = get_logger()
        logger.debug(f"Parsing value shape: {text}")

        try:
            result = super().parse(ShapeLexer().tokenize(text))

            if result is None and text.strip() == "":
                raise ParseError("Value shape is empty.")

            if result is None:
                raise ParseError(f"Failed to parse value shape '{text}'.")

            return result

        except ParseError:
            logger.debug("Parse error encountered")
            raise
        except Exception as e:
            logger.debug(f"Unexpected parsing error: {e}")
            raise ParseError(f"Parse failed: {e}")

    def error(self, token):
        """Handle syntax errors during parsing.

        Args:
            token: Problematic token or None for end of input

        Raises:
            ParseError: Always
        """
        if token:
            error_msg = (
                f"Syntax error near '{token.value}' "
                f"(type: {token.type}) at position {token.index}"
            )
        else:
            error_msg = "Syntax error: unexpected end of value shape"

        raise ParseError(error_msg)
