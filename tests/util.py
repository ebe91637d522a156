#! cd .. && python -m tests.util
import difflib
import textwrap

from rbfmt.token import Token
from rbfmt.lexer import Lexer
from rbfmt.stream import TokenStream
from rbfmt.options import FormatOptions

def source(text):
    """ remove the common indentation and the first newline of a test source """
    text = textwrap.dedent(text)
    if text.startswith("\n"):
        text = text[1:]
    return text

def structural(text):
    """ return (type, value) for every token which is not white space """
    return [(tok.type, tok.value) for tok in Lexer().lex(text)
        if tok.type not in (Token.T_WHITESPACE, Token.T_NEWLINE)]

def lines(text):
    return list(TokenStream.fromText(text).lines())

def options(**keys):
    return FormatOptions(**keys)

def textdiff(expected, actual):
    """ return a printable diff of two source texts """
    return '\n'.join(difflib.unified_diff(
        expected.split("\n"), actual.split("\n"),
        "expected", "actual", lineterm=""))

if __name__ == '__main__':
    for tok in Lexer().lex(source("""
        def foo
          1
        end
    """)):
        print(tok)
