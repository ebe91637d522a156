
import os
import sys
import time
import logging
from concurrent.futures import ThreadPoolExecutor

from .formatter import FormatError
from .options import FormatOptions, loadConfig, findConfig

# file names which are ruby source regardless of extension
ruby_names = ('Rakefile', 'Gemfile')
ruby_extensions = ('.rb', '.rake', '.gemspec', '.ru')

class Clock(object):
    def __init__(self, text):
        super(Clock, self).__init__()
        self.text = text

    def __enter__(self):
        self.ts = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.te = time.perf_counter()
        logging.debug("%s: %.6f", self.text, self.te - self.ts)

        return False

def isruby(path):
    name = os.path.basename(path)
    return name in ruby_names or name.endswith(ruby_extensions)

def collect_paths(paths):
    """ expand directories into the ruby files they contain

    files named on the command line are always included, the
    order of the input is preserved and directories are sorted.
    """

    found = []
    for path in paths:
        if path != "-" and os.path.isdir(path):
            for dirpath, dirnames, filenames in os.walk(path):
                dirnames.sort()
                for filename in sorted(filenames):
                    if isruby(filename):
                        found.append(os.path.join(dirpath, filename))
        else:
            found.append(path)
    return found

def build_options(config=None, overrides=None):
    """ merge the configuration file with command line overrides

    config is the path to a json file. when not given, the file
    .rbfmt.json in the current directory is used if it exists.
    overrides with a value of None are ignored.
    """

    if config is None:
        config = findConfig()

    values = {}
    if config is not None:
        logging.debug("reading configuration from %s", config)
        values.update(loadConfig(config))

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    return FormatOptions.fromDict(values)

class FileResult(object):
    """ the outcome of formatting one file """

    def __init__(self, path, result=None, error=None, written=False):
        super(FileResult, self).__init__()
        self.path = path
        self.result = result
        self.error = error
        self.written = written

    @property
    def name(self):
        return "<stdin>" if self.path == "-" else self.path

    @property
    def changed(self):
        return self.result is not None and self.result.changed

def read_source(path):
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as rf:
        return rf.read()

def format_file(formatter, path, write=False):
    """ format a single file, errors are returned and never raised """

    try:
        text = read_source(path)
        with Clock("format %s" % path):
            result = formatter.format(text)
    except (OSError, UnicodeDecodeError, FormatError) as e:
        return FileResult(path, error=e)

    written = False
    if write and path != "-" and result.changed:
        try:
            with open(path, "w", encoding="utf-8") as wf:
                wf.write(result.text)
        except OSError as e:
            return FileResult(path, result, error=e)
        written = True

    return FileResult(path, result, written=written)

def format_files(formatter, paths, write=False, jobs=1):
    """ format every path, the results are in the same order as paths """

    if jobs <= 1 or len(paths) <= 1:
        return [format_file(formatter, path, write) for path in paths]

    with ThreadPoolExecutor(max_workers=jobs) as executor:
        return list(executor.map(
            lambda path: format_file(formatter, path, write), paths))
