
class TokenError(Exception):
    def __init__(self, token, message):
        self.original_message = message
        message = "type: %s line: %d column: %d (%r) %s" % (token.type, token.line, token.index, token.value, message)
        super(TokenError, self).__init__(message)

        self.token = token

    @property
    def line(self):
        return self.token.line

    @property
    def column(self):
        return self.token.index

class Token(object):

    # tokens produced by the lexer
    T_KEYWORD = "T_KEYWORD"
    T_IDENTIFIER = "T_IDENTIFIER"
    T_OPERATOR = "T_OPERATOR"
    T_STRING = "T_STRING"
    T_LITERAL = "T_LITERAL"
    T_COMMENT = "T_COMMENT"
    T_WHITESPACE = "T_WHITESPACE"
    T_NEWLINE = "T_NEWLINE"
    T_PUNCTUATION = "T_PUNCTUATION"

    # tokens which are never inspected for keyword content
    OPAQUE = (T_STRING, T_COMMENT)
    # tokens which carry no code
    TRIVIA = (T_WHITESPACE, T_NEWLINE, T_COMMENT)

    __slots__ = ('type', 'value', 'line', 'index', 'end_line', 'end_index')

    def __init__(self, type, line=0, index=0, value="", end_line=None, end_index=None):
        super(Token, self).__init__()
        self.type = type
        self.line = line
        self.index = index
        self.value = value

        # the span ends on the last character of the token
        if end_line is None:
            end_line = line + value.count("\n")
        if end_index is None:
            if "\n" in value:
                end_index = len(value) - value.rfind("\n") - 1
            else:
                end_index = index + len(value)
        self.end_line = end_line
        self.end_index = end_index

    def __str__(self):
        return self.toString(False)

    def __repr__(self):
        return "Token(Token.%s, %r, %r, %r)" % (
            self.type, self.line, self.index, self.value)

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value and \
            self.line == other.line and self.index == other.index

    def __hash__(self):
        return hash((self.type, self.value, self.line, self.index))

    @property
    def span(self):
        return (self.line, self.index, self.end_line, self.end_index)

    def toString(self, pretty=True):
        if pretty:
            return "%s<%s,%s,%r>\n" % (self.type, self.line, self.index, self.value)
        return "%s<%r>" % (self.type, self.value)

    def isStructural(self):
        return self.type not in Token.TRIVIA

    def isOpaque(self):
        return self.type in Token.OPAQUE

    def isMultiline(self):
        return "\n" in self.value

    def isKeyword(self, *values):
        return self.type == Token.T_KEYWORD and (not values or self.value in values)

    def isPunctuation(self, *values):
        return self.type == Token.T_PUNCTUATION and (not values or self.value in values)

    def isOperator(self, *values):
        return self.type == Token.T_OPERATOR and (not values or self.value in values)

    def clone(self, **keys):
        """ return a copy of this token, replacing the given attributes

        tokens are shared between the lexer output and the formatter,
        a changed token is always a new token.
        """
        attrs = {
            'type': self.type,
            'line': self.line,
            'index': self.index,
            'value': self.value,
        }
        attrs.update(keys)
        return Token(attrs['type'], attrs['line'], attrs['index'], attrs['value'])
