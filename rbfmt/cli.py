
import sys
import logging

from .lexer import Lexer, LexError
from .formatter import Formatter, FormatError
from .options import InvalidOptions
from .cli_util import Clock, collect_paths, build_options, format_files, \
    read_source

class CLI(object):
    def __init__(self):
        super(CLI, self).__init__()

    def register(self, parser):
        pass

    def execute(self, args):
        pass

def add_option_arguments(subparser):
    """ arguments which configure a format pass """

    subparser.add_argument('--indent-size', dest='indent_width', type=int, default=None,
        help="number of spaces per indentation level (default 2)")
    subparser.add_argument('--max-line-length', dest='max_line_length', type=int, default=None,
        help="maximum line length before lines are split (default 80)")
    subparser.add_argument('--trailing-comma', dest='trailing_comma',
        action='store_true', default=None,
        help="add a trailing comma to multi-line lists")
    subparser.add_argument('--no-trailing-comma', dest='trailing_comma',
        action='store_false', default=None,
        help="remove the trailing comma of multi-line lists")
    subparser.add_argument('--config', type=str, default=None,
        help="path to a json configuration file")

def options_from_args(args):
    overrides = {
        'indent_width': args.indent_width,
        'max_line_length': args.max_line_length,
        'trailing_comma': args.trailing_comma,
    }
    return build_options(args.config, overrides)

class FormatCLI(CLI):
    """ reformat ruby source files

    without --write or --check the formatted text is printed.
    """

    def register(self, parser):
        subparser = parser.add_parser('format',
            aliases=['fmt'],
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('-w', '--write', action='store_true',
            help="rewrite files in place")
        subparser.add_argument('-c', '--check', action='store_true',
            help="report files which would be reformatted")
        subparser.add_argument('-j', '--jobs', type=int, default=1,
            help="number of files to format in parallel")
        add_option_arguments(subparser)
        subparser.add_argument('paths', nargs='*',
            help="files or directories, use - to read stdin")

    def execute(self, args):

        paths = collect_paths(args.paths)
        if not paths:
            print("No files specified.")
            return 1

        try:
            options = options_from_args(args)
        except (InvalidOptions, OSError) as e:
            logging.error("%s", e)
            return 1

        formatter = Formatter(options)

        with Clock("format %d files" % len(paths)):
            results = format_files(formatter, paths,
                write=args.write and not args.check,
                jobs=max(1, args.jobs))

        rv = 0
        for item in results:

            if item.result is not None:
                for diag in item.result.diagnostics:
                    logging.warning("%s: %s", item.name, diag)

            if item.error is not None:
                logging.error("%s: %s", item.name, item.error)
                rv = 1
                continue

            if args.check:
                if item.changed:
                    print("%s: Would reformat" % item.name)
                    rv = 1
                else:
                    print("%s: Looks good!" % item.name)

            elif args.write and item.path != "-":
                if item.written:
                    print("%s: Reformatted" % item.name)
                else:
                    print("%s: Already formatted" % item.name)

            else:
                sys.stdout.write(item.result.text)

        return rv

class LexCLI(CLI):
    """ print the tokens of a ruby source file
    """

    def register(self, parser):
        subparser = parser.add_parser('lex',
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        subparser.add_argument('path')

    def execute(self, args):

        try:
            text = read_source(args.path)
            with Clock("lex"):
                tokens = Lexer().lex(text)
        except (OSError, UnicodeDecodeError, LexError) as e:
            logging.error("%s: %s", args.path, e)
            return 1

        for token in tokens:
            sys.stdout.write(token.toString())

        return 0

class LinesCLI(CLI):
    """ print each logical line with its indentation depth

    the trailing comma and indentation options are applied,
    long lines are not split.
    """

    def register(self, parser):
        subparser = parser.add_parser('lines',
            description=self.__doc__,
            help=self.__doc__.strip().split("\n")[0])
        subparser.set_defaults(func=self.execute, cli=self)

        add_option_arguments(subparser)
        subparser.add_argument('path')

    def execute(self, args):

        try:
            formatter = Formatter(options_from_args(args))
            text = read_source(args.path)
            layout = list(formatter.layout(text))
        except (OSError, UnicodeDecodeError, InvalidOptions, FormatError) as e:
            logging.error("%s: %s", args.path, e)
            return 1

        for line, depth in layout:
            print("%4d %2d %s" % (line.number, depth, line.text()))

        return 0

def register_parsers(parser):

    FormatCLI().register(parser)
    LexCLI().register(parser)
    LinesCLI().register(parser)
