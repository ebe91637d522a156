
import os
import json

CONFIG_NAME = ".rbfmt.json"

class InvalidOptions(ValueError):
    pass

class FormatOptions(object):
    """
    configuration for one format pass

    indent_width    : number of spaces per indentation level
    max_line_length : lines longer than this are reflowed
    trailing_comma  : add (True) or remove (False) the trailing comma
                      of multi-line lists

    options are validated on construction and can not be modified,
    use replace() to derive new options.
    """

    # accepted spellings of each option name
    aliases = {
        'indent_width': 'indent_width',
        'indent_size': 'indent_width',
        'indent': 'indent_width',
        'max_line_length': 'max_line_length',
        'columns': 'max_line_length',
        'trailing_comma': 'trailing_comma',
    }

    __slots__ = ('_indent_width', '_max_line_length', '_trailing_comma')

    def __init__(self, indent_width=2, max_line_length=80, trailing_comma=False):
        super(FormatOptions, self).__init__()

        _positive('indent_width', indent_width)
        _positive('max_line_length', max_line_length)
        if not isinstance(trailing_comma, bool):
            raise InvalidOptions("trailing_comma must be true or false, found %r" % (trailing_comma,))

        object.__setattr__(self, '_indent_width', indent_width)
        object.__setattr__(self, '_max_line_length', max_line_length)
        object.__setattr__(self, '_trailing_comma', trailing_comma)

    def __setattr__(self, name, value):
        raise AttributeError("FormatOptions are immutable")

    @property
    def indent_width(self):
        return self._indent_width

    @property
    def max_line_length(self):
        return self._max_line_length

    @property
    def trailing_comma(self):
        return self._trailing_comma

    def __repr__(self):
        return "FormatOptions(indent_width=%r, max_line_length=%r, trailing_comma=%r)" % (
            self.indent_width, self.max_line_length, self.trailing_comma)

    def __eq__(self, other):
        if not isinstance(other, FormatOptions):
            return NotImplemented
        return self.toDict() == other.toDict()

    def __hash__(self):
        return hash((self.indent_width, self.max_line_length, self.trailing_comma))

    def toDict(self):
        return {
            'indent_width': self.indent_width,
            'max_line_length': self.max_line_length,
            'trailing_comma': self.trailing_comma,
        }

    def replace(self, **keys):
        values = self.toDict()
        values.update(FormatOptions._canonical(keys))
        return FormatOptions(**values)

    @staticmethod
    def _canonical(opts):
        values = {}
        for key, value in opts.items():
            if key not in FormatOptions.aliases:
                raise InvalidOptions("unrecognized option: %s" % key)
            values[FormatOptions.aliases[key]] = value
        return values

    @staticmethod
    def fromDict(opts=None):
        """ build options from a dictionary, missing keys use the default """
        if opts is None:
            opts = {}
        if isinstance(opts, FormatOptions):
            return opts
        if not isinstance(opts, dict):
            raise InvalidOptions("expected a mapping of options, found %s" % type(opts).__name__)
        return FormatOptions(**FormatOptions._canonical(opts))

def _positive(name, value):
    # bool is a subclass of int, but never a valid width
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOptions("%s must be an integer, found %r" % (name, value))
    if value <= 0:
        raise InvalidOptions("%s must be positive, found %d" % (name, value))

def loadConfig(path):
    """ read a json configuration file and return a dictionary of options

    the keys are validated, but values are validated only when the
    dictionary is used to construct FormatOptions.
    """

    try:
        with open(path, "r") as rf:
            config = json.load(rf)
    except ValueError as e:
        raise InvalidOptions("%s: invalid json: %s" % (path, e))

    if not isinstance(config, dict):
        raise InvalidOptions("%s: expected a json object" % path)

    return FormatOptions._canonical(config)

def findConfig(directory=None):
    """ return the path to the configuration file in directory, or None """

    if directory is None:
        directory = os.getcwd()

    path = os.path.join(directory, CONFIG_NAME)
    if os.path.isfile(path):
        return path
    return None
