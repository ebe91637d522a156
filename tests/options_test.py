#! cd .. && python3 -m tests.options_test

import os
import json
import tempfile
import unittest

from rbfmt.options import FormatOptions, InvalidOptions, loadConfig, findConfig, \
    CONFIG_NAME

class FormatOptionsTestCase(unittest.TestCase):

    def test_001_defaults(self):
        opts = FormatOptions()
        self.assertEqual(opts.indent_width, 2)
        self.assertEqual(opts.max_line_length, 80)
        self.assertFalse(opts.trailing_comma)

    def test_002_invalid(self):
        for keys in [
                {'indent_width': 0},
                {'indent_width': -1},
                {'indent_width': "2"},
                {'indent_width': True},
                {'max_line_length': 1.5},
                {'max_line_length': None},
                {'trailing_comma': "yes"},
                {'trailing_comma': 1}]:
            with self.assertRaises(InvalidOptions, msg=repr(keys)):
                FormatOptions(**keys)

    def test_003_value_error(self):
        self.assertTrue(issubclass(InvalidOptions, ValueError))

    def test_004_immutable(self):
        opts = FormatOptions()
        with self.assertRaises(AttributeError):
            opts.indent_width = 4

    def test_005_replace(self):
        opts = FormatOptions()
        other = opts.replace(indent_size=4)
        self.assertEqual(other.indent_width, 4)
        self.assertEqual(opts.indent_width, 2)
        self.assertNotEqual(opts, other)
        self.assertEqual(other, FormatOptions(indent_width=4))

class FromDictTestCase(unittest.TestCase):

    def test_001_aliases(self):
        opts = FormatOptions.fromDict({'indent': 4, 'columns': 100})
        self.assertEqual(opts.indent_width, 4)
        self.assertEqual(opts.max_line_length, 100)

    def test_002_unknown(self):
        with self.assertRaises(InvalidOptions):
            FormatOptions.fromDict({'minify': True})

    def test_003_none(self):
        self.assertEqual(FormatOptions.fromDict(None), FormatOptions())
        opts = FormatOptions(trailing_comma=True)
        self.assertIs(FormatOptions.fromDict(opts), opts)

    def test_004_not_a_mapping(self):
        with self.assertRaises(InvalidOptions):
            FormatOptions.fromDict([('indent_width', 2)])

    def test_005_round_trip(self):
        opts = FormatOptions(indent_width=3, max_line_length=120, trailing_comma=True)
        self.assertEqual(FormatOptions.fromDict(opts.toDict()), opts)

class ConfigTestCase(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tempdir.name, CONFIG_NAME)

    def tearDown(self):
        self.tempdir.cleanup()

    def _write(self, text):
        with open(self.path, "w") as wf:
            wf.write(text)

    def test_001_load(self):
        self._write(json.dumps({"indent_size": 4, "trailing_comma": True}))
        self.assertEqual(loadConfig(self.path), {'indent_width': 4, 'trailing_comma': True})

    def test_002_invalid_json(self):
        self._write("{indent_width: 4")
        with self.assertRaises(InvalidOptions):
            loadConfig(self.path)

    def test_003_not_an_object(self):
        self._write("[1, 2]")
        with self.assertRaises(InvalidOptions):
            loadConfig(self.path)

    def test_004_unknown_key(self):
        self._write(json.dumps({"tabs": True}))
        with self.assertRaises(InvalidOptions):
            loadConfig(self.path)

    def test_005_find(self):
        self.assertIsNone(findConfig(self.tempdir.name))
        self._write("{}")
        self.assertEqual(findConfig(self.tempdir.name), self.path)

def main():
    unittest.main()

if __name__ == '__main__':
    main()
