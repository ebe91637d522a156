"""
block context tracking

the tracker consumes logical lines in source order and assigns each
line an indentation depth. the depth is the sum of three parts:

    keyword depth : the number of open blocks (if ... end, do ... end)
    bracket depth : the number of lines with unclosed ( [ {
    continuation  : one extra level for a statement continued
                    from the previous line

only structural tokens are inspected. strings and comments are opaque
and a keyword is only a keyword when the lexer classified it as one.
"""

from .token import Token, TokenError

class UnbalancedBlockError(TokenError):
    pass

# keywords which open a block closed by `end`
openers = {'if', 'unless', 'def', 'class', 'module', 'begin', 'case',
           'while', 'until', 'for', 'do'}

# openers which are modifiers unless they start a statement
modifier_openers = {'if', 'unless', 'while', 'until'}

# loops which accept an optional `do`: while x do ... end
loop_openers = {'while', 'until', 'for'}

# keywords which close the current block and reopen it at the same depth
mid_block = {'else', 'elsif', 'rescue', 'ensure', 'when'}

# keywords after which a modifier keyword begins a new statement
statement_keywords = {'and', 'or', 'not', 'then', 'do', 'else', 'begin'}

open_brackets = "([{"
close_brackets = ")]}"

# operators which may begin a continuation line. any other binary
# operator at the start of a line begins a new statement
leading_operators = {".", "&.", "&&", "||"}

# operators which never need white space to be recognized as a
# continuation at the start of a line
method_chain = {".", "&."}

# operators which, at the end of a line, continue the statement
continue_after = {"+", "-", "*", "/", "%", "**", "&&", "||", "=", "+=",
    "-=", "*=", "/=", "%=", "**=", "||=", "&&=", "|=", "&=", "^=", "<<=",
    ">>=", "==", "!=", "===", "<", ">", "<=", ">=", "<=>", "=~", "!~",
    "<<", ">>", "?", ":", ".", "&.", "=>", "&", "^", "and", "or", "not"}

def isoperator(tok, values):
    """ true if the token is an operator (or word operator) in values """
    return tok.value in values and \
        (tok.type == Token.T_OPERATOR or tok.isKeyword('and', 'or', 'not'))

def isoperand(tok):
    """ true if the token completes an expression """
    if tok.type in (Token.T_IDENTIFIER, Token.T_STRING):
        return True
    if tok.type == Token.T_LITERAL:
        # a label, `key:`, is followed by a value
        return not tok.value.endswith(':')
    if tok.type == Token.T_PUNCTUATION:
        return tok.value in close_brackets
    if tok.type == Token.T_KEYWORD:
        return tok.value in ('end', 'self', 'true', 'false', 'nil', 'super')
    return False

def isleading_operator(tokens, i):
    """ true if tokens[i] is a binary operator which may begin a line

    tokens is the full token list of a line, including white space.
    """
    tok = tokens[i]
    if not isoperator(tok, leading_operators):
        return False
    if tok.value in method_chain:
        return True
    return i + 1 < len(tokens) and tokens[i + 1].type == Token.T_WHITESPACE

class BlockFrame(object):
    """ one open block on the nesting stack

    kind is the keyword which opened the block, token the opening
    token (used to report unclosed blocks). state is a sub-state:
    a case waits for its first `when`, a loop may consume a `do`.
    """

    def __init__(self, kind, token, state=None):
        super(BlockFrame, self).__init__()
        self.kind = kind
        self.token = token
        self.state = state

    def __repr__(self):
        return "BlockFrame(%r, line=%d, state=%r)" % (
            self.kind, self.token.line, self.state)

    def clone(self):
        return BlockFrame(self.kind, self.token, self.state)

class BracketCounter(object):
    """
    a bracket depth counter, independent of the keyword stack

    besides the depth, the counter records which lines opened an
    indentation level and which multi-line groups were closed by a
    line beginning with the closing bracket.
    """

    def __init__(self):
        super(BracketCounter, self).__init__()
        # open bracket tokens and the index of the line they were opened on
        self.stack = []
        # [height, weight, base] for each line which left brackets open
        self.levels = []

        # results for the most recent line
        self.opened = False
        self.shared = None
        self.groups = []
        self.errors = []

    def depth(self):
        return len(self.stack)

    def indent(self):
        return sum(level[1] for level in self.levels)

    def feed(self, line, index=0):
        """ update the counter for a line

        returns the bracket indentation for rendering the line
        """

        self.opened = False
        self.groups = []
        self.errors = []

        h0 = len(self.stack)

        # closing brackets at the start of the line dedent the line itself
        leading = 0
        for tok in line.code:
            if tok.isPunctuation(*close_brackets):
                leading += 1
            elif not tok.isKeyword('end'):
                break
        leading = min(leading, h0)

        indent = sum(level[1] for level in self.levels
            if level[0] < h0 - leading)

        # the leading closers end a group opened on a line which also
        # opened a block. the line aligns with the line that opened it
        self.shared = None
        for height, weight, base in self.levels:
            if height >= h0 - leading and base is not None:
                if self.shared is None or base < self.shared:
                    self.shared = base

        low = h0
        position = 0
        for tok in line.code:
            if tok.isPunctuation(*open_brackets):
                self.stack.append((tok, index))
            elif tok.isPunctuation(*close_brackets):
                if not self.stack:
                    self.errors.append(UnbalancedBlockError(tok, "unmatched '%s'" % tok.value))
                else:
                    opening, opened_on = self.stack.pop()
                    low = min(low, len(self.stack))
                    if position == 0 and opened_on < index:
                        self.groups.append((opening, opened_on, index))
            position += 1

        self.levels = [level for level in self.levels if level[0] < low]
        if len(self.stack) > low:
            self.levels.append([low, 1, None])
            self.opened = True

        return indent

    def share(self, base):
        """ the most recent line opened a keyword block as well as brackets

        a line only indents the following lines by a single level. base
        is the keyword depth before the line opened its blocks
        """
        if self.opened:
            self.levels[-1][1] = 0
            self.levels[-1][2] = base

    def snapshot(self):
        return (list(self.stack), [list(level) for level in self.levels])

    def restore(self, state):
        stack, levels = state
        self.stack = list(stack)
        self.levels = [list(level) for level in levels]

class BlockTracker(object):
    """
    a stack based state machine which assigns a depth to each line

    the tracker owns its frame stack for the duration of one format
    pass. classify() must be called for every line in source order.
    """

    def __init__(self):
        super(BlockTracker, self).__init__()
        self.stack = []
        self.brackets = BracketCounter()
        self.errors = []

        # the previous line continues on the next line
        self._continued = False
        self._index = 0

    def depth(self):
        return len(self.stack)

    def classify(self, line):
        """ return the render depth of the line and update the stack """

        index = self._index
        self._index += 1

        if line.isBlank():
            return 0

        if not line.structural:
            # a comment line takes the depth of the enclosing block
            return len(self.stack) + self.brackets.indent()

        code = line.code
        lead = code[0] if code else None

        reopen = None
        start = 0
        if lead is not None and lead is line.structural[0]:
            if lead.isKeyword('end'):
                self._pop(lead)
                start = 1
            elif self._isMidBlock(lead):
                frame = self._pop(lead)
                if frame is not None:
                    reopen = BlockFrame(frame.kind, frame.token, self._midState(frame, lead))
                start = 1

        depth = len(self.stack)
        if reopen is not None:
            self.stack.append(reopen)

        continuation = self._isContinuation(line, lead, start)

        indent = self.brackets.feed(line, index)
        self.errors.extend(self.brackets.errors)

        pending = self._scan(line.structural, start)
        if pending and self.brackets.opened:
            self.brackets.share(depth)
        self.stack.extend(pending)

        last = line.last()
        self._continued = not self.brackets.opened and self._continues(last)

        if self.brackets.shared is not None:
            depth = min(depth, self.brackets.shared)

        return depth + indent + (1 if continuation else 0)

    def finish(self):
        """ report blocks and brackets which were never closed """

        for frame in self.stack:
            self.errors.append(UnbalancedBlockError(frame.token,
                "unclosed block '%s'" % frame.kind))

        for tok, index in self.brackets.stack:
            self.errors.append(UnbalancedBlockError(tok,
                "unclosed '%s'" % tok.value))

        return self.errors

    def snapshot(self):
        return (
            [frame.clone() for frame in self.stack],
            self.brackets.snapshot(),
            len(self.errors),
            self._continued,
            self._index,
        )

    def restore(self, state):
        stack, brackets, nerrors, continued, index = state
        self.stack = [frame.clone() for frame in stack]
        self.brackets.restore(brackets)
        del self.errors[nerrors:]
        self._continued = continued
        self._index = index

    def _pop(self, tok):
        if not self.stack:
            self.errors.append(UnbalancedBlockError(tok,
                "'%s' without an open block" % tok.value))
            return None
        return self.stack.pop()

    def _isMidBlock(self, tok):
        if tok.isKeyword(*mid_block):
            return True
        # pattern matching: case value / in pattern
        return tok.isKeyword('in') and bool(self.stack) and \
            self.stack[-1].kind == 'case'

    def _midState(self, frame, tok):
        if frame.kind == 'case':
            return 'in_%s' % tok.value
        return None

    def _isContinuation(self, line, lead, start):
        if start:
            # end and mid-block keywords always align with their block
            return False

        first = line.structural[0]
        if first.isPunctuation(*close_brackets):
            return False

        content = line.content()
        if isleading_operator(content, 0):
            return True

        return self._continued

    def _continues(self, last):
        if last is None:
            return False

        if last.isPunctuation('\\'):
            return True

        if last.isPunctuation(','):
            return self.brackets.depth() == 0

        return isoperator(last, continue_after)

    def _scan(self, tokens, start):
        """ find the blocks opened by a line

        returns the frames left open at the end of the line. an `end`
        closes a block opened on the same line first, so that single
        line forms such as `if x then y end` do not change the depth.
        """

        pending = []
        prev = tokens[start - 1] if start > 0 else None

        for i in range(start, len(tokens)):
            tok = tokens[i]

            if tok.type == Token.T_KEYWORD:
                value = tok.value

                if value == 'end':
                    if pending:
                        pending.pop()
                    else:
                        self._pop(tok)

                elif value == 'do' and pending and pending[-1].state == 'awaiting_do':
                    pending[-1].state = None

                elif value in openers and self._opens(tokens, i, prev):
                    state = None
                    if value in loop_openers:
                        state = 'awaiting_do'
                    elif value == 'case':
                        state = 'awaiting_when'
                    pending.append(BlockFrame(value, tok, state))

            prev = tok

        return pending

    def _opens(self, tokens, i, prev):
        value = tokens[i].value

        if value == 'def':
            return not self._isEndless(tokens, i)

        if value in modifier_openers:
            return self._isStatementStart(prev)

        return True

    def _isStatementStart(self, prev):
        """ true if a keyword following prev begins a statement

        `return 1 if x` is a modifier, `x = if y` opens a block
        """
        if prev is None:
            return True

        if prev.type == Token.T_OPERATOR:
            return True

        if prev.type == Token.T_PUNCTUATION:
            return prev.value not in close_brackets

        if prev.type == Token.T_KEYWORD:
            return prev.value in statement_keywords

        if prev.type == Token.T_LITERAL:
            # keyword argument: foo(key: if x then 1 else 2 end)
            return prev.value.endswith(':')

        return False

    def _isEndless(self, tokens, i):
        """ true for an endless method definition: def name(args) = expr """

        j = i + 1
        # def self.name
        if j + 1 < len(tokens) and tokens[j + 1].isOperator('.'):
            j += 2
        # the method name
        j += 1

        if j < len(tokens) and tokens[j].isPunctuation('('):
            depth = 0
            while j < len(tokens):
                if tokens[j].isPunctuation('('):
                    depth += 1
                elif tokens[j].isPunctuation(')'):
                    depth -= 1
                    if depth == 0:
                        j += 1
                        break
                j += 1

        return j < len(tokens) and tokens[j].isOperator('=')
