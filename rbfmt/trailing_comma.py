"""
trailing comma normalization for multi-line lists

a group is a bracket pair opened on one line and closed by a later
line which begins with the closing bracket:

    foo(
      a,
      b
    )

only argument lists, array literals and hash literals are changed.
grouping parentheses, indexing, block braces and the parameters of
a method definition do not accept a trailing comma.
"""

from .token import Token
from .stream import LogicalLine
from .tracker import BracketCounter, isoperand, isoperator, continue_after

def findGroups(lines):
    """ return (opening token, first line index, last line index)
    for every multi-line group closed by a line beginning with the
    closing bracket.
    """

    counter = BracketCounter()
    groups = []
    for index, line in enumerate(lines):
        counter.feed(line, index)
        groups.extend(counter.groups)
    return groups

def _before(line, tok):
    """ return the token immediately preceding tok on the line, or None """
    for i, other in enumerate(line.tokens):
        if other is tok:
            return line.tokens[i - 1] if i > 0 else None
    return None

def _previous_code(line, tok):
    """ return the structural token preceding tok on the line, or None """
    prev = None
    for other in line.structural:
        if other is tok:
            return prev
        prev = other
    return None

def _elements(line):
    """ the structural tokens of a line, without heredoc bodies

    a heredoc body follows the heredoc opener on the same logical
    line, a comma after the element belongs after the opener.
    """
    return [tok for tok in line.structural
        if not (tok.type == Token.T_STRING and tok.value.startswith("\n"))]

def isdefinition(line, opening):
    """ true if the parenthesis opens the parameters of a method definition

    the definition may follow other code: private def name(
    """
    tokens = line.structural
    for i, tok in enumerate(tokens):
        if tok is opening:
            break
    else:
        return False

    # def name(  or  def self.name(
    if i >= 2 and tokens[i - 2].isKeyword('def'):
        return True
    return i >= 4 and tokens[i - 4].isKeyword('def') and \
        tokens[i - 2].isOperator('.')

def accepts(group, opening=None):
    """ true if the list opened by the first line of the group
    accepts a trailing comma

    when opening is not given the last bracket on the first line is used
    """

    opening_line = group[0]
    if opening is None:
        for tok in reversed(opening_line.code):
            if tok.isPunctuation('(', '[', '{'):
                opening = tok
                break

    if opening is None or not opening_line.code:
        return False

    prev = _previous_code(opening_line, opening)

    if opening.value == '(':
        if isdefinition(opening_line, opening):
            return False
        # a call: the parenthesis directly follows the method name
        adjacent = _before(opening_line, opening)
        if adjacent is None or adjacent.type == Token.T_WHITESPACE:
            return False
        return adjacent.type == Token.T_IDENTIFIER or \
            adjacent.isPunctuation(')', ']') or \
            adjacent.isKeyword('super', 'yield')

    if prev is not None and prev.isOperator('->'):
        return False

    # an array or hash literal, not indexing or a block
    return prev is None or not isoperand(prev)

def _last_element(group):
    """ return the index of the last line of the group holding code """

    for i in range(len(group) - 2, -1, -1):
        line = group[i]
        if line.structural:
            return i
    return None

def normalize(group, options, opening=None):
    """ add or remove the trailing comma of one multi-line group

    group is the list of logical lines from the line opening the
    bracket to the line closing it. returns a new list of lines.
    """

    if len(group) < 2 or not accepts(group, opening):
        return group

    i = _last_element(group)
    if i is None:
        return group

    line = group[i]
    elements = _elements(line)
    last = elements[-1]

    if i == 0 and last.isPunctuation('(', '[', '{'):
        # an empty list
        return group

    # the last element of the list
    element = []
    for tok in elements:
        if tok.isPunctuation(','):
            element = []
        else:
            element.append(tok)

    if element and element[0].isOperator('&'):
        # a block argument can not be followed by a comma
        return group

    tokens = list(line.tokens)
    position = tokens.index(last)

    if options.trailing_comma:
        if last.isPunctuation(',', '\\') or isoperator(last, continue_after):
            return group
        comma = Token(Token.T_PUNCTUATION, last.end_line, last.end_index, ",")
        tokens.insert(position + 1, comma)
    else:
        if not last.isPunctuation(','):
            return group
        del tokens[position]

    result = list(group)
    result[i] = LogicalLine(tokens, line.number)
    return result

def apply(lines, options):
    """ normalize every multi-line group of a source file """

    lines = list(lines)
    for opening, first, last in findGroups(lines):
        group = normalize(lines[first:last + 1], options, opening)
        lines[first:last + 1] = group
    return lines
