"""
Tests for the C# lexer.
"""

import pytest

from unity_style_checker.errors import LexError
from unity_style_checker.lexer import TokenKind, comment_body, is_banner_comment, significant, tokenize


def kinds(text):
    return [(t.kind, t.text) for t in tokenize(text) if t.kind != TokenKind.WHITESPACE]


class TestLossless:
    """Joining token texts gives back the input."""

    @pytest.mark.parametrize("text", [
        "",
        "int x = 1;",
        "class A\r\n{\r\n    // crlf\r\n}\r\n",
        "\ufeffusing System;\n",
        'var s = @"C:\\path ""quoted""";',
        'var s = $"{a} and {b["key"]} {{literal}}";',
        'var s = $@"{x}\nmultiline";',
        'var raw = """\n  text "quoted"\n  """;',
        "char c = '\\''; char d = '{';",
        "#region Fields\n#if UNITY_EDITOR\nint a;\n#endif\n#endregion\n",
        "/* block */ /** doc */ /// doc\n//// four\n",
        "x >>= 2; List<List<int>> y;",
        "float f = .5f + 1e-3 + 0x1F + 0b1010 + 1_000_000UL;",
    ])
    def test_roundtrip(self, text):
        """Token texts concatenate to the original text."""
        assert "".join(t.text for t in tokenize(text)) == text

    def test_fixture_roundtrip(self, player_path):
        """The sample script survives tokenization unchanged."""
        text = player_path.read_text(encoding="utf-8")
        assert "".join(t.text for t in tokenize(text)) == text


class TestClassification:
    """Token kinds."""

    def test_simple_statement(self):
        assert kinds("int x = 1;") == [
            (TokenKind.KEYWORD, "int"),
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.PUNCTUATION, "="),
            (TokenKind.LITERAL, "1"),
            (TokenKind.PUNCTUATION, ";"),
        ]

    def test_comment_forms(self):
        """// is a line comment, /// a doc comment, //// a line comment again."""
        result = kinds("// a\n/// b\n//// c\n/* d */\n/** e */\n")
        assert [k for k, _ in result] == [
            TokenKind.LINE_COMMENT,
            TokenKind.DOC_COMMENT,
            TokenKind.LINE_COMMENT,
            TokenKind.BLOCK_COMMENT,
            TokenKind.DOC_COMMENT,
        ]

    def test_line_comment_excludes_cr(self):
        tokens = tokenize("// note\r\nx")
        assert tokens[0].text == "// note"

    def test_preprocessor_only_at_line_start(self):
        result = kinds("    #region Movement\nint a;\n")
        assert result[0] == (TokenKind.PREPROCESSOR, "#region Movement")

    def test_verbatim_identifier(self):
        assert kinds("@class")[0] == (TokenKind.IDENTIFIER, "@class")

    def test_contextual_words_are_identifiers(self):
        """var, partial, async, record are not reserved."""
        result = kinds("var partial async record")
        assert all(k == TokenKind.IDENTIFIER for k, _ in result)

    def test_generic_closers_are_not_fused(self):
        texts = [text for _, text in kinds("List<List<int>> a;")]
        assert texts.count(">") == 2

    def test_multichar_operators(self):
        texts = [text for _, text in kinds("a ??= b => c == d != e && f || g")]
        assert "??=" in texts and "=>" in texts and "==" in texts and "!=" in texts
        assert "&&" in texts and "||" in texts

    def test_interpolated_string_with_nested_quotes_is_one_literal(self):
        result = kinds('x = $"a {dict["k"]} b";')
        literals = [text for k, text in result if k == TokenKind.LITERAL]
        assert literals == ['$"a {dict["k"]} b"']

    def test_comment_markers_inside_strings(self):
        result = kinds('var url = "http://example.com";')
        assert not any(k == TokenKind.LINE_COMMENT for k, _ in result)

    def test_significant_skips_trivia(self):
        tokens = tokenize("// c\nint /* x */ a;\n")
        assert [t.text for t in significant(tokens)] == ["int", "a", ";"]


class TestPositions:
    """1-based line/column tracking."""

    def test_second_line_position(self):
        tokens = [t for t in tokenize("a\n  b") if t.text == "b"]
        assert (tokens[0].line, tokens[0].column) == (2, 3)

    def test_multiline_token_end(self):
        token = tokenize("/* a\nbc */ x")[0]
        assert (token.line, token.column, token.end_line, token.end_column) == (1, 1, 2, 6)

    def test_offsets(self):
        tokens = tokenize("ab cd")
        assert [t.offset for t in tokens] == [0, 2, 3]


class TestErrors:
    """Unterminated constructs."""

    def test_unterminated_string(self):
        with pytest.raises(LexError) as info:
            tokenize('string s = "abc;\nint x;')
        err = info.value
        assert (err.line, err.column) == (1, 12)
        assert "".join(t.text for t in err.tokens) == "string s = "

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError) as info:
            tokenize("int a;\n/* open")
        assert (info.value.line, info.value.column) == (2, 1)

    def test_unterminated_char(self):
        with pytest.raises(LexError):
            tokenize("char c = 'a;\n")


class TestCommentHelpers:

    def test_comment_body(self):
        tokens = tokenize("// hi\n/// doc")
        assert comment_body(tokens[0]) == " hi"
        assert comment_body(tokens[2]) == " doc"

    @pytest.mark.parametrize("text,expected", [
        ("//////////", True),
        ("// ----------", True),
        ("// ==========", True),
        ("// real text", False),
    ])
    def test_banner(self, text, expected):
        assert is_banner_comment(tokenize(text)[0]) is expected
