import textwrap

import pytest

from class_extractor.normalizer import _strip_comments, _tighten, minify_css


def test_minify_basic_rule():
    css = textwrap.dedent(
        """
        /* generated */
        .p-4 {
          padding: 1rem;
        }

        .hover\\:bg-1:hover  >  span ,  .m-2 {
          margin: 0.5rem;
          color: red;
        }
        """
    )

    assert minify_css(css) == ".p-4{padding:1rem}.hover\\:bg-1:hover>span,.m-2{margin:0.5rem;color:red}"


def test_unterminated_comment_drops_rest():
    assert minify_css(".a { color: red; } /* unterminated .b { color: blue; }") == ".a{color:red}"


def test_comment_only_input():
    assert minify_css("/* nothing */") == ""


def test_empty_input():
    assert minify_css("") == ""


def test_adjacent_comments():
    assert minify_css("a/**//* x */{b:c}") == "a{b:c}"


def test_comment_marker_inside_string_is_kept():
    css = '.a::before { content: "/* not a comment */"; }'

    assert minify_css(css) == '.a::before{content:"/* not a comment */"}'


def test_string_spacing_is_preserved():
    assert minify_css(".a { content: ' a  :  b ' ; }") == ".a{content:' a  :  b '}"


def test_escaped_quote_inside_string():
    assert minify_css('.a{content:"x\\" /* y */"}') == '.a{content:"x\\" /* y */"}'


def test_unterminated_string_is_kept_verbatim():
    assert minify_css(".a { content: 'abc") == ".a{content:'abc"


def test_plus_inside_calc_keeps_spaces():
    assert minify_css(".a { width: calc(100% + 2px); }") == ".a{width:calc(100% + 2px)}"


def test_adjacent_sibling_combinator_is_tightened():
    assert minify_css(".a + .b ~ .c { x: y }") == ".a+.b~.c{x:y}"


def test_descendant_space_is_kept():
    assert minify_css(".a   .b\n.c { x: y }") == ".a .b .c{x:y}"


def test_media_query():
    css = "@media (min-width: 640px) {\n  .sm\\:p-4 { padding: 1rem; }\n}\n"

    assert minify_css(css) == "@media (min-width:640px){.sm\\:p-4{padding:1rem}}"


@pytest.mark.parametrize(
    "css, expected",
    [
        ("a{b:c;}", "a{b:c}"),
        ("a { b : c ; }", "a{b:c}"),
        ("a{b:c;;}", "a{b:c;}"),
    ],
)
def test_trailing_semicolon(css: str, expected: str):
    assert minify_css(css) == expected


def test_strip_comments_segments():
    assert _strip_comments('a  /* x */ { content: "/* y */" }') == [
        ("a { content: ", False),
        ('"/* y */"', True),
        (" }", False),
    ]


def test_tighten_keeps_literal_segments():
    assert _tighten([("a { b: ", False), ("' ; '", True), (" ; }", False)]) == "a{b:' ; '}"
