#! cd .. && python3 -m tests.reflow_test

import unittest

from rbfmt.renderer import render
from rbfmt.reflow import Placer, breakpoints, split, findBreak, reflow
from tests.util import lines, options

def content(text):
    return lines(text)[0].content()

class BreakpointTestCase(unittest.TestCase):

    def test_001_comma(self):
        # foo ( a , _ b )
        self.assertEqual(breakpoints(content("foo(a, b)")), [4])

    def test_002_no_break_before_closer(self):
        self.assertEqual(breakpoints(content("foo(a,)")), [])

    def test_003_operator(self):
        # a line beginning with a binary operator is a new statement
        for text in ["a + b", "a - b", "a && b", "a || b", "a and b", "a == b", "a < b"]:
            self.assertEqual(breakpoints(content(text)), [], text)

    def test_004_unary(self):
        self.assertEqual(breakpoints(content("x = -1")), [])

    def test_005_method_chain(self):
        # a . b . c
        self.assertEqual(breakpoints(content("a.b.c")), [1, 3])

    def test_006_definition(self):
        tokens = content("def self.foo(a, b)")
        points = breakpoints(tokens)
        self.assertEqual(len(points), 1)
        head, tail = split(tokens, points[0])
        self.assertEqual(''.join(t.value for t in tail), "b)")

    def test_007_strings(self):
        # foo ( 'a, b' , _ 'c' )
        self.assertEqual(breakpoints(content("foo('a, b', 'c')")), [4])

    def test_008_safe_navigation(self):
        # a &. b
        self.assertEqual(breakpoints(content("a&.b")), [1])

    def test_009_chain_operand(self):
        # foo ( a ) . b
        self.assertEqual(breakpoints(content("foo(a).b")), [4])
        # x _ = _ [ 1 , _ 2 ] . size
        self.assertEqual(breakpoints(content("x = [1, 2].size")), [8, 10])

class SplitTestCase(unittest.TestCase):

    def test_001_split(self):
        head, tail = split(content("foo(a, b)"), 4)
        self.assertEqual(''.join(t.value for t in head), "foo(a,")
        self.assertEqual(''.join(t.value for t in tail), "b)")

    def test_002_rightmost(self):
        tokens = content("foo(aaaa, bbbb, cccc, dddd)")
        j = findBreak(tokens, 0, options(max_line_length=20))
        # after the second comma
        self.assertEqual(j, 7)

    def test_003_leftmost(self):
        tokens = content("foo(aaaaaaaaaa, bbbbbbbbbbbbb, c)")
        j = findBreak(tokens, 0, options(max_line_length=10))
        self.assertEqual(j, 4)

    def test_004_none(self):
        self.assertIsNone(findBreak(content("x = 'aaaaaaaaaaaa'"), 0, options(max_line_length=5)))

class ReflowTestCase(unittest.TestCase):

    def _reflow(self, text, depth=0, **keys):
        opts = options(**keys)
        return reflow(render(lines(text)[0], depth, opts), opts)

    def test_001_fits(self):
        result = self._reflow("foo(a, b)")
        self.assertEqual([r.text for r in result], ["foo(a, b)"])
        self.assertFalse(result[0].reflowed)

    def test_002_split(self):
        result = self._reflow("foo(aaaa, bbbb, cccc, dddd)", max_line_length=20)
        self.assertEqual([r.text for r in result], ["foo(aaaa, bbbb,", "  cccc, dddd)"])
        self.assertTrue(all(r.reflowed for r in result))
        self.assertFalse(any(r.overLength for r in result))

    def test_003_split_depth(self):
        result = self._reflow("result = records.active.sorted", depth=1, max_line_length=24)
        self.assertEqual([r.text for r in result], ["  result = records", "    .active.sorted"])

    def test_004_unsplittable(self):
        result = self._reflow("x = 'aaaaaaaaaaaaaaaaaaaaaaaa'", max_line_length=20)
        self.assertEqual(len(result), 1)
        self.assertTrue(result[0].overLength)

    def test_005_multiline(self):
        result = self._reflow("foo(aaaa, bbbb, <<~EOS)\ntext\nEOS\n", max_line_length=10)
        self.assertEqual(len(result), 1)
        self.assertTrue(result[0].overLength)
        self.assertEqual(result[0].text, "foo(aaaa, bbbb, <<~EOS)\ntext\nEOS")

    def test_006_placer(self):
        placer = Placer(2)
        self.assertEqual(placer.peek(None), 2)
        self.assertEqual(placer.place(None), 2)
        self.assertEqual(placer.peek(None), 3)
        self.assertEqual(placer.place(None), 3)

    def test_007_rejoin(self):
        # removing the breaks gives back the original line
        for text in ["foo(aaaa, bbbb, cccc, dddd)",
                "records.where(active: true).order(:name).limit(10)",
                "value = first&.second&.third(aaaa, bbbb)"]:
            result = self._reflow(text, max_line_length=20)
            self.assertGreater(len(result), 1, text)
            joined = result[0].text.strip()
            for piece in result[1:]:
                tail = piece.text.strip()
                sep = "" if tail.startswith((".", "&.")) else " "
                joined += sep + tail
            self.assertEqual(joined, text)

    def test_008_continuation_lines(self):
        # every continuation begins with a method call or follows a comma
        text = "if alpha_value && beta_value || gamma.value(aaaa, bbbb).size > 10"
        result = self._reflow(text, max_line_length=20)
        for prev, piece in zip(result, result[1:]):
            tail = piece.text.strip()
            self.assertTrue(tail.startswith((".", "&.")) or prev.text.endswith(","),
                piece.text)

    def test_009_operator_kept(self):
        result = self._reflow("total = alpha + beta + gamma", depth=1, max_line_length=24)
        self.assertEqual([r.text for r in result], ["  total = alpha + beta + gamma"])
        self.assertTrue(result[0].overLength)

def main():
    unittest.main()

if __name__ == '__main__':
    main()
