#! cd .. && python3 -m rbfmt.lexer

import sys

from .token import Token, TokenError

class LexError(TokenError):
    pass

# characters which are always a single punctuation token
chset_punctuation = "()[]{},;"
chset_whitespace = " \t\r\f\v"
chset_number = "0123456789_"
chset_hex = "0123456789abcdefABCDEF_"

reserved_words = {
    'alias', 'and', 'begin', 'BEGIN', 'break', 'case', 'class', 'def',
    'defined?', 'do', 'else', 'elsif', 'end', 'END', 'ensure', 'false',
    'for', 'if', 'in', 'module', 'next', 'nil', 'not', 'or', 'redo',
    'rescue', 'retry', 'return', 'self', 'super', 'then', 'true', 'undef',
    'unless', 'until', 'when', 'while', 'yield',
    '__FILE__', '__LINE__', '__ENCODING__',
}

# keywords which complete an expression, a value is not expected after them
value_keywords = {
    'end', 'self', 'true', 'false', 'nil', 'super', 'yield', 'redo',
    'retry', '__FILE__', '__LINE__', '__ENCODING__', 'defined?',
}

# operators sorted so that the longest match is found first
operators = sorted([
    "**=", "<=>", "===", "...", "<<=", ">>=", "&&=", "||=",
    "**", "==", "!=", ">=", "<=", "&&", "||", "<<", ">>", "=~", "!~",
    "+=", "-=", "*=", "/=", "%=", "|=", "&=", "^=", "..", "::", "=>",
    "->", "&.",
    "+", "-", "*", "/", "%", "=", "<", ">", "!", "&", "|", "^", "~",
    "?", ":", ".",
], key=len, reverse=True)

# operators which may be used as a method name in a symbol, e.g. :<=>
symbol_operators = sorted([
    "[]=", "[]", "<=>", "===", "==", "=~", "!=", "!~", "**", "+@", "-@",
    "<<", ">>", "<=", ">=", "+", "-", "*", "/", "%", "<", ">", "!", "~",
    "&", "|", "^",
], key=len, reverse=True)

# operators after which the next word is a method name, not a keyword
method_operators = {".", "&.", "::"}

percent_types = "qQwWiIrsx"
percent_interpolate = "QWIrx"
bracket_pairs = {'(': ')', '[': ']', '{': '}', '<': '>'}

def isword(c):
    return c.isalnum() or c == '_' or (c != '' and ord(c) > 127)

def isword_start(c):
    return c.isalpha() or c == '_' or (c != '' and ord(c) > 127)

class LexerBase(object):
    """
    base class for a generic look-ahead-by-N lexer

    the whole input is held in memory. _line and _index always refer
    to the position of the next character to be read, so that tokens
    which begin with a newline still report the line they start on.
    """

    def __init__(self):
        super(LexerBase, self).__init__()

    def _init(self, seq, default_type):

        if hasattr(seq, 'read'):
            seq = seq.read()

        self._text = seq
        self._pos = 0
        self._len = len(seq)

        # the line and column of the next character to be read
        self._line = 1
        self._index = 0
        # the position of the most recently consumed character
        self._last = (1, 0)

        self._default_type = default_type
        # the type of the current token
        self._type = default_type
        # the value of the current token
        self._tok = []
        # the line where the current token began
        self._initial_line = -1
        # the column of the current line where the token began
        self._initial_index = -1
        # the last token successfully pushed
        self._prev_token = None

        self.tokens = []

    def _getch(self):
        """ read one character from the input stream"""
        if self._pos >= self._len:
            raise StopIteration()

        c = self._text[self._pos]
        self._pos += 1
        self._last = (self._line, self._index)

        if c == '\n':
            self._line += 1
            self._index = 0
        else:
            self._index += 1
        return c

    def _peekch(self, offset=0):
        """ return the next character, do not advance the iterator

        returns an empty string at the end of the input
        """
        i = self._pos + offset
        if i < self._len:
            return self._text[i]
        return ''

    def _peekstr(self, n, offset=0):
        """ return the next N characters, do not advance the iterator """
        i = self._pos + offset
        return self._text[i:i + n]

    def _putch(self, c):
        """ append a character to the current token """

        if self._initial_line < 0:
            self._initial_line, self._initial_index = self._last

        self._tok.append(c)

    def _take(self):
        """ consume the next character into the current token """
        self._putch(self._getch())

    def _gettok(self):
        return ''.join(self._tok)

    def _restok(self):
        self._tok = []

    def _push(self):
        """ push a new token """

        self._prev_token = Token(
            self._type,
            self._initial_line,
            self._initial_index,
            self._gettok()
        )
        self.tokens.append(self._prev_token)
        self._type = self._default_type
        self._initial_line = -1
        self._initial_index = -1
        self._restok()

    def _maybe_push(self):
        """ push a new token if there is a token to push """
        if self._tok:
            self._push()

    def _error(self, message):

        if self._initial_line < 0:
            line, index = self._line, self._index
        else:
            line, index = self._initial_line, self._initial_index
        token = Token(self._type, line, index, self._gettok())
        return LexError(token, message)

class Lexer(LexerBase):
    """
    read tokens from a file or string

    every character of the input belongs to exactly one token, joining
    the value of all tokens reproduces the input.
    """

    def __init__(self, opts=None):
        super(Lexer, self).__init__()

        if not opts:
            opts = {}

    def lex(self, seq):

        self._init(seq, Token.T_IDENTIFIER)
        # heredocs waiting for the end of the current line
        self._heredocs = []

        try:
            self._lex()
        except StopIteration:
            raise self._error("Unexpected End of Sequence")

        if self._heredocs:
            raise self._error("unterminated heredoc %s" % self._heredocs[0][0])

        return self.tokens

    def _lex(self):

        while self._pos < self._len:

            c = self._peekch()

            if c == '\n':
                self._lex_newline()

            elif c in chset_whitespace:
                self._lex_whitespace()

            elif c == '#':
                self._lex_comment()

            elif c == '=' and self._index == 0 and self._peekstr(6) == '=begin' and \
                    self._peekch(6) in ' \t\r\n':
                self._lex_documentation()

            elif c == '_' and self._index == 0 and self._peekstr(7) == '__END__' and \
                    self._peekch(7) in '\r\n':
                self._lex_data()

            elif self._is_alias_operand(c):
                self._lex_method_name()

            elif c == '\\':
                if self._peekch(1) not in ('\n', '\r'):
                    self._take()
                    raise self._error("expected newline after '\\'")
                self._type = Token.T_PUNCTUATION
                self._take()
                self._push()

            elif c in chset_punctuation:
                self._type = Token.T_PUNCTUATION
                self._take()
                self._push()

            elif c == '"' or c == '`':
                self._type = Token.T_STRING
                self._take()
                self._lex_quoted(c, c, True)
                self._push()

            elif c == '\'':
                self._type = Token.T_STRING
                self._take()
                self._lex_quoted(c, c, False)
                self._push()

            elif c == ':':
                self._lex_colon()

            elif c == '%' and self._is_percent_literal():
                self._lex_percent()

            elif c == '/' and self._is_regex():
                self._type = Token.T_STRING
                self._take()
                self._lex_quoted('/', '/', True)
                self._lex_flags()
                self._push()

            elif c == '<' and self._is_heredoc():
                self._lex_heredoc_start()

            elif c == '?' and self._is_character_literal():
                self._type = Token.T_STRING
                self._take()
                if self._peekch() == '\\':
                    self._take()
                self._take()
                self._push()

            elif c.isdigit():
                self._lex_number()

            elif c == '@' or c == '$':
                self._lex_variable()

            elif isword_start(c):
                self._lex_word()

            else:
                self._lex_operator()

    def _lex_newline(self):
        """ push an end of line token, then read any pending heredoc bodies """
        self._type = Token.T_NEWLINE
        self._take()

        if not self._heredocs:
            self._push()
            return

        # the body of a heredoc begins with the newline that ends
        # the line of the heredoc opener. the body is one string token
        # which includes the terminating line.
        self._type = Token.T_STRING
        heredocs = self._heredocs
        self._heredocs = []
        first = True
        for name, indented in heredocs:
            if not first:
                self._type = Token.T_STRING
                self._take()  # the newline ending the previous terminator
            first = False
            self._lex_heredoc_body(name, indented)
            self._push()

    def _lex_heredoc_body(self, name, indented):

        while True:
            if self._pos >= self._len:
                raise self._error("unterminated heredoc %s" % name)

            end = self._text.find('\n', self._pos)
            if end < 0:
                end = self._len
            line = self._text[self._pos:end]
            terminator = line.strip() if indented else line.rstrip('\r')

            for c in line:
                self._take()

            if terminator == name:
                return

            if end >= self._len:
                raise self._error("unterminated heredoc %s" % name)

            self._take()

    def _lex_whitespace(self):
        self._type = Token.T_WHITESPACE
        while self._peekch() and self._peekch() in chset_whitespace:
            self._take()
        self._push()

    def _lex_comment(self):
        """ read a comment up to, but not including, the end of the line """
        self._type = Token.T_COMMENT
        while self._peekch() and self._peekch() != '\n':
            if self._peekstr(2) == '\r\n':
                break
            self._take()
        self._push()

    def _lex_documentation(self):
        """ read an embedded document, =begin ... =end, as a single comment

        the token ends at the end of the =end line
        """
        self._type = Token.T_COMMENT
        while True:
            if self._pos >= self._len:
                raise self._error("unterminated embedded document")

            at_line_start = self._index == 0
            if at_line_start and self._peekstr(4) == '=end' and \
                    self._peekch(4) in ' \t\r\n':
                while self._peekch() and self._peekch() != '\n':
                    self._take()
                self._push()
                return
            self._take()

    def _lex_data(self):
        """ everything following __END__ is data and is never formatted """
        self._type = Token.T_COMMENT
        while self._pos < self._len:
            self._take()
        self._push()

    def _lex_quoted(self, opening, closing, interpolate):
        """ read the body of a quoted literal after the opening delimiter

        bracket delimiters nest, escaped characters are passed through
        unmodified and interpolated expressions may contain nested strings.
        """

        nested = 0
        while True:
            c = self._peekch()
            if c == '':
                raise self._error("unterminated string")

            if c == '\\':
                self._take()
                if self._peekch() == '':
                    raise self._error("expected character")
                self._take()

            elif interpolate and c == '#' and self._peekch(1) == '{':
                self._take()
                self._take()
                self._lex_interpolation()

            elif c == closing and nested == 0:
                self._take()
                return

            elif c == closing:
                nested -= 1
                self._take()

            elif c == opening and opening != closing:
                nested += 1
                self._take()

            else:
                self._take()

    def _lex_interpolation(self):
        """ read an interpolated expression up to the matching brace """

        depth = 1
        while True:
            c = self._peekch()
            if c == '':
                raise self._error("unterminated string interpolation")

            if c == '{':
                depth += 1
                self._take()
            elif c == '}':
                depth -= 1
                self._take()
                if depth == 0:
                    return
            elif c == '"' or c == '`':
                self._take()
                self._lex_quoted(c, c, True)
            elif c == '\'':
                self._take()
                self._lex_quoted(c, c, False)
            elif c == '\\':
                self._take()
                self._take()
            else:
                self._take()

    def _lex_flags(self):
        while self._peekch() and self._peekch().isalpha():
            self._take()

    def _lex_percent(self):
        """ read a percent literal such as %w[a b] or %Q(text) """

        self._type = Token.T_STRING
        self._take()  # %

        kind = ''
        if self._peekch() in percent_types:
            kind = self._peekch()
            self._take()

        opening = self._getch()
        self._putch(opening)
        closing = bracket_pairs.get(opening, opening)
        interpolate = kind == '' or kind in percent_interpolate

        self._lex_quoted(opening, closing, interpolate)

        if kind == 'r':
            self._lex_flags()
        self._push()

    def _lex_heredoc_start(self):
        """ read a heredoc opener, <<~NAME, <<-NAME or <<NAME

        the body is read when the end of the line is reached
        """
        self._type = Token.T_STRING
        self._take()
        self._take()

        indented = False
        if self._peekch() in '~-':
            indented = True
            self._take()

        c = self._peekch()
        if c in '\'"`':
            self._take()
            name = []
            while self._peekch() and self._peekch() not in (c, '\n'):
                name.append(self._peekch())
                self._take()
            if self._peekch() != c:
                raise self._error("unterminated heredoc identifier")
            self._take()
            name = ''.join(name)
        else:
            name = []
            while isword(self._peekch()):
                name.append(self._peekch())
                self._take()
            name = ''.join(name)

        self._heredocs.append((name, indented))
        self._push()

    def _lex_number(self):
        """ read an integer, float, rational or imaginary number """

        self._type = Token.T_LITERAL

        if self._peekch() == '0' and self._peekch(1) in 'xXbBoOdD' and \
                self._peekch(2) in chset_hex and self._peekch(2):
            self._take()
            self._take()
            while self._peekch() and self._peekch() in chset_hex:
                self._take()
        else:
            while self._peekch() and self._peekch() in chset_number:
                self._take()

            if self._peekch() == '.' and self._peekch(1).isdigit():
                self._take()
                while self._peekch() and self._peekch() in chset_number:
                    self._take()

            if self._peekch() in ('e', 'E') and self._peekch():
                n = self._peekch(1)
                if n.isdigit() or (n in '+-' and n and self._peekch(2).isdigit()):
                    self._take()
                    self._take()
                    while self._peekch() and self._peekch() in chset_number:
                        self._take()

        # rational and imaginary suffixes
        while self._peekch() in ('r', 'i') and self._peekch() and \
                not isword(self._peekch(1)):
            self._take()

        self._push()

    def _lex_variable(self):
        """ read an instance, class or global variable """

        self._type = Token.T_IDENTIFIER
        c = self._getch()
        self._putch(c)

        if c == '@' and self._peekch() == '@':
            self._take()

        if c == '$' and self._peekch() and not isword_start(self._peekch()):
            # special globals: $! $0 $~ $: $1 ...
            if self._peekch().isdigit():
                while self._peekch().isdigit():
                    self._take()
            elif self._peekch() not in ' \t\r\n':
                self._take()
            self._push()
            return

        while isword(self._peekch()):
            self._take()

        if len(self._tok) == 1 or self._gettok() == '@@':
            raise self._error("expected variable name")

        self._push()

    def _lex_word(self):
        """ read an identifier or keyword

        a word is only a keyword when it is in a position where
        the keyword is meaningful. method calls and method definitions
        which happen to share a name with a keyword are identifiers.
        """

        while isword(self._peekch()):
            self._take()

        # predicate and bang methods, e.g. empty? save!
        if self._peekch() in ('?', '!') and self._peekch() and \
                self._peekch(1) != '=' and self._peekch(1) != ':':
            self._take()
        elif self._peekch() in ('?', '!') and self._peekch() and \
                self._peekstr(2, 1) == '==':
            self._take()

        word = self._gettok()
        prev = self._prev()

        method_name = prev is not None and (
            (prev.type == Token.T_OPERATOR and prev.value in method_operators) or
            (prev.type == Token.T_KEYWORD and prev.value == 'def'))

        if method_name and prev.value == 'def' and \
                self._peekch() == '=' and self._peekch(1) == '(':
            # setter method definition, def name=(value)
            self._take()
            self._type = Token.T_IDENTIFIER

        elif self._peekch() == ':' and self._peekch(1) != ':' and \
                not (prev is not None and prev.type == Token.T_OPERATOR and prev.value == '?'):
            # a label in a hash or keyword argument, e.g. if: true
            self._take()
            self._type = Token.T_LITERAL

        elif method_name:
            self._type = Token.T_IDENTIFIER

        elif word in reserved_words:
            self._type = Token.T_KEYWORD

        else:
            self._type = Token.T_IDENTIFIER

        self._push()

    def _lex_method_name(self):
        """ read a method name given to `alias`

        operator and setter methods are names here, e.g. `alias / +`
        or `alias b= c=`.
        """

        self._type = Token.T_IDENTIFIER
        if isword_start(self._peekch()):
            while isword(self._peekch()):
                self._take()
            if self._peekch() and self._peekch() in '?!=' and \
                    self._peekch(1) not in ('=', '~', '>'):
                self._take()
        else:
            for op in symbol_operators:
                if self._peekstr(len(op)) == op:
                    for c in op:
                        self._take()
                    break

        self._push()

    def _lex_colon(self):
        """ read a symbol, a scope operator or a ternary colon """

        n = self._peekch(1)

        if n == ':':
            self._type = Token.T_OPERATOR
            self._take()
            self._take()
            self._push()
            return

        if n == '"' or n == '\'':
            self._type = Token.T_STRING
            self._take()
            self._take()
            self._lex_quoted(n, n, n == '"')
            self._push()
            return

        if isword_start(n) or (n in '@$' and n):
            self._type = Token.T_LITERAL
            self._take()
            while isword(self._peekch()) or self._peekch() in ('@', '$') and self._peekch():
                self._take()
            if self._peekch() in ('?', '!', '=') and self._peekch() and \
                    self._peekch(1) not in ('=', '~', '>'):
                self._take()
            self._push()
            return

        if self._value_expected(self._space_before()):
            for op in symbol_operators:
                if self._peekstr(len(op), 1) == op:
                    self._type = Token.T_LITERAL
                    self._take()
                    for c in op:
                        self._take()
                    self._push()
                    return

        self._type = Token.T_OPERATOR
        self._take()
        self._push()

    def _lex_operator(self):

        prev = self._prev()
        if prev is not None and self._peekch(1) == '@' and self._peekch() in '+-!~' and \
                (prev.isKeyword('def') or prev.isOperator(*method_operators)):
            # unary operator method: def -@
            self._type = Token.T_IDENTIFIER
            self._take()
            self._take()
            self._push()
            return

        for op in operators:
            if self._peekstr(len(op)) == op:
                self._type = Token.T_OPERATOR
                for c in op:
                    self._take()
                self._push()
                return

        self._take()
        raise self._error("unexpected character")

    def _prev(self):
        """ return the most recent token which is not white space or a comment

        returns None at the start of a line
        """
        i = len(self.tokens) - 1
        while i >= 0:
            tok = self.tokens[i]
            if tok.type == Token.T_NEWLINE:
                return None
            if tok.type not in (Token.T_WHITESPACE, Token.T_COMMENT):
                return tok
            i -= 1
        return None

    def _is_alias_operand(self, c):
        """ true if the next token is the new or old name of an `alias` """

        if not c or not self._space_before():
            return False

        names = []
        i = len(self.tokens) - 1
        while i >= 0 and len(names) < 2:
            tok = self.tokens[i]
            if tok.type == Token.T_NEWLINE:
                break
            if tok.type not in (Token.T_WHITESPACE, Token.T_COMMENT):
                names.append(tok)
            i -= 1

        if not names:
            return False
        if not names[0].isKeyword('alias') and not (len(names) == 2 and
                names[1].isKeyword('alias') and
                names[0].type in (Token.T_IDENTIFIER, Token.T_LITERAL)):
            return False

        return isword_start(c) or \
            any(self._peekstr(len(op)) == op for op in symbol_operators)

    def _space_before(self):
        return bool(self.tokens) and self.tokens[-1].type == Token.T_WHITESPACE

    def _value_expected(self, space_before):
        """ return true if the next token must begin an expression

        used to decide if '/' begins a regex, '%' begins a literal
        and '<<' begins a heredoc.
        """

        prev = self._prev()
        if prev is None:
            return True

        if prev.type == Token.T_OPERATOR:
            return True

        if prev.type == Token.T_PUNCTUATION:
            return prev.value not in ")]}"

        if prev.type == Token.T_KEYWORD:
            return prev.value not in value_keywords

        if prev.type == Token.T_IDENTIFIER:
            # a method call with an argument: `puts /abc/`
            # when the next character is not white space
            return space_before and self._peekch(1) not in ' \t\r\n='

        if prev.type == Token.T_LITERAL:
            # a label, `key: value`
            return prev.value.endswith(':')

        return False

    def _is_regex(self):
        if not self._value_expected(self._space_before()):
            return False

        prev = self._prev()
        if prev is not None and prev.type == Token.T_IDENTIFIER:
            # ambiguous with division, require the regex to end on this line
            end = self._text.find('\n', self._pos)
            if end < 0:
                end = self._len
            i = self._pos + 1
            while i < end:
                if self._text[i] == '\\':
                    i += 2
                    continue
                if self._text[i] == '/':
                    return True
                i += 1
            return False

        return True

    def _is_percent_literal(self):
        n = self._peekch(1)
        if not n:
            return False

        if n in percent_types:
            d = self._peekch(2)
            if not d or isword(d) or d in ' \t\r\n':
                return False
        elif n not in '([{<|!':
            return False

        return self._value_expected(self._space_before())

    def _is_heredoc(self):
        if self._peekstr(2) != '<<':
            return False

        n = self._peekch(2)
        offset = 2
        if n in '~-' and n:
            offset = 3
            n = self._peekch(3)
        else:
            # <<NAME requires an upper case name or a quoted name
            if not (n in '\'"`' and n) and not (n.isupper() or n == '_'):
                return False

        if not n or not (isword_start(n) or n in '\'"`'):
            return False

        return self._value_expected(self._space_before())

    def _is_character_literal(self):
        n = self._peekch(1)
        if not n or n in ' \t\r\n':
            return False
        if n == '\\':
            return self._value_expected(self._space_before())
        if isword(self._peekch(2)):
            return False
        return self._value_expected(self._space_before())

def main():  # pragma: no cover

    text = "def foo\n  x = 1 if y\nend\n"

    if len(sys.argv) == 2 and sys.argv[1] == "-":
        text = sys.stdin.read()

    tokens = Lexer().lex(text)
    for token in tokens:
        sys.stdout.write(token.toString())

if __name__ == '__main__':  # pragma: no cover
    main()
