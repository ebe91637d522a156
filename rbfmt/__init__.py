
from .token import Token, TokenError
from .lexer import Lexer, LexError
from .stream import LogicalLine, TokenStream
from .tracker import BlockTracker, UnbalancedBlockError
from .reflow import OverLengthLineWarning
from .options import FormatOptions, InvalidOptions
from .formatter import Formatter, FormatResult, FormatError, TokenizationFailure
from . import cli

def format(text: str, opts=None) -> FormatResult:
    """ Format ruby source code

    :param text: the ruby source to format
    :param opts: a FormatOptions instance or a dictionary of options,
                 for example {'indent_width': 2, 'max_line_length': 80}
    """

    return Formatter(opts).format(text)

def lex(text: str) -> list:
    """ Split ruby source into tokens

    :param text: the ruby source to tokenize
    """
    return Lexer().lex(text)
