#! cd .. && python3 -m rbfmt.formatter
"""
the format pass

    text -> tokens -> logical lines -> trailing commas -> depth -> render -> reflow

each call to format() owns a new block tracker, no state is shared
between passes. the tracker is the only source of indentation: lines
produced by reflow are classified by the same tracker, so that a
formatted file formats to itself.
"""

import sys
import logging

from .token import TokenError
from .lexer import Lexer, LexError
from .stream import TokenStream
from .tracker import BlockTracker
from .renderer import render
from .reflow import reflow, OverLengthLineWarning
from .options import FormatOptions
from . import trailing_comma

logger = logging.getLogger("rbfmt.formatter")

class FormatError(TokenError):
    pass

class TokenizationFailure(FormatError):
    """ the input could not be tokenized, no output is produced """

    def __init__(self, error):
        super(TokenizationFailure, self).__init__(error.token, error.original_message)

class FormatResult(object):
    """
    the output of a format pass

    text        : the formatted source
    diagnostics : non-fatal errors (unbalanced blocks, long lines)
                  sorted by position in the input
    changed     : true if the text differs from the input
    """

    def __init__(self, text, diagnostics=None, changed=False):
        super(FormatResult, self).__init__()
        self.text = text
        self.diagnostics = diagnostics or []
        self.changed = changed

    def __repr__(self):
        return "FormatResult(changed=%r, diagnostics=%d)" % (
            self.changed, len(self.diagnostics))

    def success(self):
        return not self.diagnostics

class TrackerPlacer(object):
    """
    assigns depths to the lines produced by reflow using the tracker

    peek() classifies the line and restores the tracker, place()
    classifies the line and keeps the new state.
    """

    def __init__(self, tracker):
        super(TrackerPlacer, self).__init__()
        self.tracker = tracker

    def peek(self, line):
        state = self.tracker.snapshot()
        depth = self.tracker.classify(line)
        self.tracker.restore(state)
        return depth

    def place(self, line):
        return self.tracker.classify(line)

class Formatter(object):
    def __init__(self, opts=None):
        super(Formatter, self).__init__()

        # raises InvalidOptions before any text is read
        self.options = FormatOptions.fromDict(opts)

    def tokenize(self, text):
        try:
            return Lexer().lex(text)
        except LexError as e:
            raise TokenizationFailure(e) from e

    def lines(self, text):
        """ return the logical lines of text, with trailing commas normalized """
        tokens = self.tokenize(text)
        lines = list(TokenStream(tokens).lines())
        return trailing_comma.apply(lines, self.options)

    def layout(self, text):
        """ yield (logical line, depth) without rendering or reflow """

        tracker = BlockTracker()
        for line in self.lines(text):
            yield line, tracker.classify(line)

    def format(self, text):

        options = self.options
        tracker = BlockTracker()
        placer = TrackerPlacer(tracker)

        output = []
        diagnostics = []
        for line in self.lines(text):

            state = tracker.snapshot()
            depth = tracker.classify(line)
            rendered = render(line, depth, options)

            if rendered.width() > options.max_line_length and not rendered.multiline:
                # the pieces are classified as they are placed
                tracker.restore(state)
                pieces = reflow(rendered, options, placer)
                if len(pieces) > 1:
                    logger.debug("line %d split into %d lines", line.number, len(pieces))
            else:
                pieces = reflow(rendered, options)

            for piece in pieces:
                if piece.overLength:
                    # at the source position of the first token of the piece
                    diagnostics.append(OverLengthLineWarning(piece.tokens[0],
                        "line is %d characters long, the maximum is %d" % (
                        piece.width(), options.max_line_length)))
                output.append(piece.text)

        diagnostics.extend(tracker.finish())
        diagnostics.sort(key=lambda e: (e.line, e.column))

        for diag in diagnostics:
            logger.debug("%s", diag)

        result = "\n".join(output)
        return FormatResult(result, diagnostics, result != text)

def main():  # pragma: no cover

    text = "class A\ndef foo(a,b)\nif a\nb\nend\nend\nend\n"

    if len(sys.argv) == 2 and sys.argv[1] == "-":
        text = sys.stdin.read()

    result = Formatter().format(text)
    sys.stdout.write(result.text)
    for diag in result.diagnostics:
        sys.stderr.write("%s\n" % diag)

if __name__ == '__main__':  # pragma: no cover
    main()
