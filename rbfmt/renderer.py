
from .token import Token

class RenderedLine(object):
    """
    the text of a logical line with canonical indentation applied

    tokens are the tokens that were rendered, without the leading and
    trailing white space of the source line.
    """

    def __init__(self, text, depth, tokens, number=0, reflowed=False, overLength=False):
        super(RenderedLine, self).__init__()
        self.text = text
        self.depth = depth
        self.tokens = tokens
        self.number = number
        self.reflowed = reflowed
        self.overLength = overLength

    def __repr__(self):
        return "RenderedLine(%d, %r)" % (self.depth, self.text)

    def __str__(self):
        return self.text

    def width(self):
        """ the length of the first physical line, in code points """
        return len(self.text.split("\n", 1)[0])

    def isBlank(self):
        return not self.tokens

    @property
    def multiline(self):
        return "\n" in self.text

def indentation(depth, options):
    return " " * (options.indent_width * depth)

def isverbatim(tok):
    """ tokens which must begin in the first column of a line """
    return tok.type == Token.T_COMMENT and \
        (tok.value.startswith("=begin") or tok.value.startswith("__END__"))

def render(line, depth, options):
    """ render a logical line at the given depth

    this is a pure function of the line, depth and options. white
    space between the first and last token is kept as is, including
    the contents of strings and comments.
    """

    tokens = line.content()

    if not tokens:
        return RenderedLine("", 0, [], line.number)

    if isverbatim(tokens[0]):
        depth = 0

    text = indentation(depth, options) + ''.join(tok.value for tok in tokens)

    return RenderedLine(text, depth, tokens, line.number)
