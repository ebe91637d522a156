"""
line length reflow

a line longer than the maximum is split after a comma, or before the
`.` of a method chain. breaks are only inserted between tokens, so the
contents of strings and comments are never changed. the white space
at a break is removed; everything else is kept in order.
"""

from .token import Token, TokenError
from .stream import LogicalLine
from .renderer import render, indentation
from .tracker import isoperator, isoperand, method_chain, close_brackets

class OverLengthLineWarning(TokenError):
    pass

class Placer(object):
    """
    assigns a depth to each line produced by reflow

    the first line keeps the depth of the original line, continuation
    lines are indented one level deeper. peek() returns the depth a
    line would receive, place() commits to it.
    """

    def __init__(self, depth):
        super(Placer, self).__init__()
        self.initial_depth = depth
        self.count = 0

    def peek(self, line):
        if self.count == 0:
            return self.initial_depth
        return self.initial_depth + 1

    def place(self, line):
        depth = self.peek(line)
        self.count += 1
        return depth

def breakpoints(tokens):
    """ return the token indices where a line break may be inserted

    a break at index j splits the line into tokens[:j] and tokens[j:].
    lines are broken after a comma, or before the `.` or `&.` of a
    method call. a line beginning with any other binary operator is
    a new statement in ruby, so no other operator is a break point.
    """

    points = []
    code = [(i, tok) for i, tok in enumerate(tokens) if tok.isStructural()]
    if not code:
        return points

    # def self.name is a method name, not a method call
    header = code[0][1].isKeyword('def', 'class', 'module')

    for n, (i, tok) in enumerate(code):

        if tok.isPunctuation(','):
            rest = code[n + 1:]
            if rest and not rest[0][1].isPunctuation(*close_brackets):
                points.append(i + 1)

        elif n > 0 and n + 1 < len(code) and not header and \
                isoperator(tok, method_chain):
            if isoperand(code[n - 1][1]):
                points.append(i)

    return points

def split(tokens, j):
    """ split tokens at j, dropping the white space around the break """

    head = list(tokens[:j])
    tail = list(tokens[j:])
    while head and head[-1].type == Token.T_WHITESPACE:
        head.pop()
    while tail and tail[0].type == Token.T_WHITESPACE:
        tail.pop(0)
    return head, tail

def findBreak(tokens, indent, options):
    """ return the index of the best break point, or None

    the rightmost break which lets the first line fit is preferred.
    when no break fits, the leftmost break is used so that the
    remainder of the line can be split again.
    """

    points = breakpoints(tokens)
    if not points:
        return None

    limit = options.max_line_length
    for j in reversed(points):
        head, _ = split(tokens, j)
        width = indent + len(''.join(tok.value for tok in head))
        if width <= limit:
            return j

    return points[0]

def reflow(rendered, options, placer=None):
    """ split a rendered line which exceeds the maximum line length

    returns one or more rendered lines. a line which can not be split
    is returned unchanged with overLength set. lines containing a token
    which spans several lines (heredocs, multi-line strings) are never
    split.
    """

    limit = options.max_line_length
    if rendered.width() <= limit:
        return [rendered]

    if rendered.multiline:
        rendered.overLength = True
        return [rendered]

    if placer is None:
        placer = Placer(rendered.depth)

    lines = []
    remaining = LogicalLine(rendered.tokens, rendered.number)
    while True:

        depth = placer.peek(remaining)
        piece = render(remaining, depth, options)

        j = None
        if piece.width() > limit:
            j = findBreak(piece.tokens, len(indentation(depth, options)), options)

        if j is None:
            piece = render(remaining, placer.place(remaining), options)
            piece.overLength = piece.width() > limit
            lines.append(piece)
            break

        head, tail = split(piece.tokens, j)
        line = LogicalLine(head, rendered.number)
        piece = render(line, placer.place(line), options)
        piece.overLength = piece.width() > limit
        lines.append(piece)

        remaining = LogicalLine(tail, rendered.number)

    if len(lines) > 1:
        for line in lines:
            line.reflowed = True

    return lines
