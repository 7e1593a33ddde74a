"""
Test suite for the jsarena source generator.

Tests cover:
- Pretty layout and indentation
- Minified output and token separation
- Parenthesization, checked by re-parsing the rendered text
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from jsarena import parse, render
from jsarena.codegen import Generator


class TestPrettyLayout(unittest.TestCase):
    """Test cases for readable output."""

    def test_function_statement(self):
        result = parse("function f(a, b) { return a + b; }")
        self.assertEqual(render(result), "function f(a, b) {\n    return a + b;\n}\n")

    def test_one_statement_per_line(self):
        self.assertEqual(render(parse("a;b;;c")), "a;\nb;\n;\nc;\n")

    def test_nested_indentation(self):
        result = parse("if (a) { while (b) { c; } } else d;")
        self.assertEqual(render(result),
                         "if (a) {\n"
                         "    while (b) {\n"
                         "        c;\n"
                         "    }\n"
                         "} else d;\n")

    def test_integers_render_in_hex(self):
        self.assertEqual(render(parse("0b1100100;")), "0x64;\n")

    def test_literals_keep_source_text(self):
        self.assertEqual(render(parse("x = 1_000 + 2.50 + 'a\\'b' + null;")),
                         "x = 1_000 + 2.50 + 'a\\'b' + null;\n")

    def test_function_expression_statement(self):
        self.assertEqual(render(parse("(function () {})()")), "(function() {})();\n")

    def test_class(self):
        result = parse("class A extends B { static n = 1; get() { return this.n; } }")
        self.assertEqual(render(result),
                         "class A extends B {\n"
                         "    static n = 1;\n"
                         "    get() {\n"
                         "        return this.n;\n"
                         "    }\n"
                         "}\n")

    def test_arrows(self):
        self.assertEqual(render(parse("f = x => x * 2;")), "f = x => x * 2;\n")
        self.assertEqual(render(parse("f = (a, b) => {}")), "f = (a, b) => {};\n")
        self.assertEqual(render(parse("f = () => a")), "f = () => a;\n")

    def test_template(self):
        self.assertEqual(render(parse("`a${ b + 1 }c`")), "`a${b + 1}c`;\n")

    def test_number_object_member(self):
        self.assertEqual(render(parse("(1).toString()")), "(1).toString();\n")

    def test_invalid_statement_keeps_source(self):
        result = parse("var = 1;\nok;")
        self.assertFalse(result.ok)
        self.assertEqual(render(result), "var = 1;\nok;\n")


class TestMinify(unittest.TestCase):
    """Test cases for compact output."""

    def minify(self, source):
        result = parse(source)
        self.assertTrue(result.ok, source)
        return render(result, minify=True)

    def test_declarations(self):
        self.assertEqual(self.minify("var foo = 100, bar = 200;"), "var foo=100,bar=200;")

    def test_adjacent_signs_stay_apart(self):
        self.assertEqual(self.minify("a - -b;"), "a- -b;")
        self.assertEqual(self.minify("a + ++b;"), "a+ ++b;")
        self.assertEqual(self.minify("- -a;"), "- -a;")

    def test_keywords(self):
        self.assertEqual(self.minify("if (a) b; else c;"), "if(a)b;else c;")
        self.assertEqual(self.minify("function f(a, b) { return a + b; }"),
                         "function f(a,b){return a+b;}")
        self.assertEqual(self.minify("function f() { return [a]; }"), "function f(){return[a];}")

    def test_statements_are_concatenated(self):
        self.assertEqual(self.minify("a;\nwhile (x) { x--; }\n"), "a;while(x){x--;}")

    def test_generator_instance(self):
        generator = Generator(parse("a = 1"), minify=True)
        self.assertEqual(generator.generate(), "a=1;")


class TestRoundTrip(unittest.TestCase):
    """Rendered output must parse back to the same tree."""

    SOURCES = [
        "(1 + 2) * 3;",
        "a - (b - c);",
        "a - b - c;",
        "2 ** 3 ** 2;",
        "(2 ** 3) ** 2;",
        "a = b ? c : d;",
        "(a ? b : c) + 1;",
        "(a ? b : c) = d;",
        "x = (a, b);",
        "f((a, b), c);",
        "a = b = c += 1;",
        "-(-a);",
        "!(a && b);",
        "(-a) ** 2;",
        "(a + b).c[d](e)++;",
        "f(function () {});",
        "(function named(x) { return x; })(1);",
        "(class {});",
        "x = y => z => y + z;",
        "x = (y => y)(1);",
        "a ? b => c : d;",
        "'it\\'s' + \"quote\";",
        "`head ${a + `inner ${b}`} tail`;",
        "class Point extends Base { static origin = null; x; constructor(x) { this.x = x; } }",
        "var i = 0; while (i < 10) i++;",
        "if (a) b; else if (c) { d; } else e;",
        "function outer() { function inner() { return; } return inner; }",
        "let items = [1, [2, 3], 0x1f];",
    ]

    def assert_round_trip(self, source, minify):
        original = parse(source)
        self.assertTrue(original.ok, source)
        rendered = render(original, minify=minify)
        reparsed = parse(rendered)
        self.assertEqual(reparsed.errors, [], rendered)
        self.assertEqual(reparsed.dump(), original.dump(), rendered)

    def test_pretty(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                self.assert_round_trip(source, minify=False)

    def test_minified(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                self.assert_round_trip(source, minify=True)

    def test_rendering_is_stable(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                once = render(parse(source))
                self.assertEqual(render(parse(once)), once)


if __name__ == '__main__':
    unittest.main()
