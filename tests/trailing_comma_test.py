#! cd .. && python3 -m tests.trailing_comma_test

import unittest

from rbfmt import trailing_comma
from rbfmt.trailing_comma import findGroups, accepts, normalize, isdefinition
from tests.util import lines, options

def texts(result):
    return [line.text() for line in result]

class FindGroupsTestCase(unittest.TestCase):

    def test_001_group(self):
        groups = findGroups(lines("foo(\na,\nb\n)"))
        self.assertEqual(len(groups), 1)
        opening, first, last = groups[0]
        self.assertEqual((opening.value, first, last), ("(", 0, 3))

    def test_002_closer_not_leading(self):
        self.assertEqual(findGroups(lines("foo(a,\nb)")), [])

    def test_003_nested(self):
        groups = findGroups(lines("foo(\n[\n1\n]\n)"))
        self.assertEqual([(o.value, a, b) for o, a, b in groups],
            [("[", 1, 3), ("(", 0, 4)])

class AcceptsTestCase(unittest.TestCase):

    def test_001_call(self):
        self.assertTrue(accepts(lines("foo(\na\n)")))
        self.assertTrue(accepts(lines("obj.foo(\na\n)")))

    def test_002_literals(self):
        self.assertTrue(accepts(lines("x = [\n1\n]")))
        self.assertTrue(accepts(lines("x = {\na: 1\n}")))
        self.assertTrue(accepts(lines("[\n1\n]")))

    def test_003_rejected(self):
        # indexing, grouping, definitions and blocks
        self.assertFalse(accepts(lines("foo[\n1\n]")))
        self.assertFalse(accepts(lines("x = (\n1\n)")))
        self.assertFalse(accepts(lines("def foo(\na\n)")))
        self.assertFalse(accepts(lines("items.each {\nx\n}")))
        self.assertFalse(accepts(lines("f = -> {\nx\n}")))
        self.assertFalse(accepts(lines("puts (\na\n)")))

    def test_004_definition_after_code(self):
        self.assertFalse(accepts(lines("private def foo(\na\n)")))
        self.assertFalse(accepts(lines("protected def self.foo(\na\n)")))
        self.assertFalse(accepts(lines("private_class_method def self.x(\na\n)")))
        # a call in a default value is still a call
        self.assertTrue(accepts(lines("def foo(a = bar(\nb\n)")))

    def test_005_isdefinition(self):
        line = lines("private def foo(a)")[0]
        opening = line.code[3]
        self.assertEqual(opening.value, "(")
        self.assertTrue(isdefinition(line, opening))
        line = lines("foo(a)")[0]
        self.assertFalse(isdefinition(line, line.code[1]))

class NormalizeTestCase(unittest.TestCase):

    def test_001_add(self):
        result = normalize(lines("foo(\na,\nb\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", "a,", "b,", ")"])

    def test_002_remove(self):
        result = normalize(lines("foo(\na,\nb,\n)"), options(trailing_comma=False))
        self.assertEqual(texts(result), ["foo(", "a,", "b", ")"])

    def test_003_unchanged(self):
        group = lines("foo(\na,\nb,\n)")
        result = normalize(group, options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", "a,", "b,", ")"])

    def test_004_comment(self):
        result = normalize(lines("foo(\na # first\n# between\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", "a, # first", "# between", ")"])

    def test_005_block_argument(self):
        result = normalize(lines("foo(\na,\n&blk\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", "a,", "&blk", ")"])

    def test_006_empty(self):
        result = normalize(lines("foo(\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", ")"])

    def test_007_same_line(self):
        result = normalize(lines("foo(a,\nb\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(a,", "b,", ")"])

    def test_008_heredoc(self):
        # the comma follows the heredoc opener, not the body
        group = lines("foo(\n<<~EOS\ntext\nEOS\n)")
        added = normalize(group, options(trailing_comma=True))
        self.assertEqual(texts(added), ["foo(", "<<~EOS,\ntext\nEOS", ")"])
        removed = normalize(added, options(trailing_comma=False))
        self.assertEqual(texts(removed), texts(group))

    def test_009_string_elements(self):
        for last in ["'bob'", ':"bob"', '"a #{b}"', "%w[a b]"]:
            group = lines("names = [\n'ann',\n%s\n]" % last)
            self.assertEqual(texts(normalize(group, options(trailing_comma=False))),
                ["names = [", "'ann',", last, "]"])
            added = normalize(group, options(trailing_comma=True))
            self.assertEqual(texts(added), ["names = [", "'ann',", last + ",", "]"])
            removed = normalize(added, options(trailing_comma=False))
            self.assertEqual(texts(removed), texts(group))

    def test_010_string_same_line(self):
        group = lines("p(\n1, 'two'\n)")
        self.assertEqual(texts(normalize(group, options(trailing_comma=False))),
            ["p(", "1, 'two'", ")"])
        self.assertEqual(texts(normalize(group, options(trailing_comma=True))),
            ["p(", "1, 'two',", ")"])

    def test_011_definition(self):
        group = lines("private def foo(\na,\nb\n)")
        self.assertEqual(texts(normalize(group, options(trailing_comma=True))),
            ["private def foo(", "a,", "b", ")"])

class ApplyTestCase(unittest.TestCase):

    def test_001_apply(self):
        original = lines("x = [\n1,\n2\n]\ny = foo(\na\n)\n")
        result = trailing_comma.apply(original, options(trailing_comma=True))
        self.assertEqual(texts(result), ["x = [", "1,", "2,", "]", "y = foo(", "a,", ")", ""])
        # the input is not modified
        self.assertEqual(original[2].text(), "2")

    def test_002_nested(self):
        result = trailing_comma.apply(lines("foo(\n[\n1\n]\n)"), options(trailing_comma=True))
        self.assertEqual(texts(result), ["foo(", "[", "1,", "],", ")"])

def main():
    unittest.main()

if __name__ == '__main__':
    main()
