
from .token import Token
from .lexer import Lexer

class LogicalLine(object):
    """
    the tokens of one source line, excluding the newline which ends it

    a line may span several physical lines when it contains a multi-line
    string, heredoc body or embedded document. those are single tokens
    and are never split.
    """

    def __init__(self, tokens, number=None):
        super(LogicalLine, self).__init__()
        self.tokens = list(tokens)

        if number is None:
            number = self.tokens[0].line if self.tokens else 0
        self.number = number

        self.structural = [t for t in self.tokens if t.isStructural()]
        # structural tokens which may contain keywords or brackets
        self.code = [t for t in self.structural if not t.isOpaque()]

    def __repr__(self):
        return "LogicalLine(%d, %r)" % (self.number, self.text())

    def __len__(self):
        return len(self.tokens)

    @property
    def leading(self):
        """ the original indentation, which is discarded on output """
        parts = []
        for tok in self.tokens:
            if tok.type != Token.T_WHITESPACE:
                break
            parts.append(tok.value)
        return ''.join(parts)

    @property
    def multiline(self):
        return any(tok.isMultiline() for tok in self.tokens)

    def isBlank(self):
        return all(tok.type == Token.T_WHITESPACE for tok in self.tokens)

    def isCommentOnly(self):
        return not self.structural and not self.isBlank()

    def first(self):
        """ the first structural token, or None """
        return self.structural[0] if self.structural else None

    def last(self):
        """ the last structural token, or None """
        return self.structural[-1] if self.structural else None

    def content(self):
        """ tokens with leading and trailing white space removed """
        i = 0
        j = len(self.tokens)
        while i < j and self.tokens[i].type == Token.T_WHITESPACE:
            i += 1
        while j > i and self.tokens[j - 1].type == Token.T_WHITESPACE:
            j -= 1
        return self.tokens[i:j]

    def text(self):
        return ''.join(tok.value for tok in self.content())

class TokenStream(object):
    """
    adapts the token sequence produced by the lexer into logical lines
    """

    def __init__(self, tokens):
        super(TokenStream, self).__init__()
        self.tokens = tokens

    @staticmethod
    def fromText(text):
        return TokenStream(Lexer().lex(text))

    def lines(self):
        """ yield every logical line in source order

        the input "a\\n" produces two lines, "a" and an empty line,
        so that joining the rendered lines with a newline reproduces
        the trailing newlines of the input.
        """
        current = []
        number = 1
        for tok in self.tokens:
            if tok.type == Token.T_NEWLINE:
                yield LogicalLine(current, number)
                current = []
                number = tok.line + 1
            else:
                current.append(tok)
        yield LogicalLine(current, number)

    def __iter__(self):
        return self.lines()
