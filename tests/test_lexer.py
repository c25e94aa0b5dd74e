import pytest

from litpdf.core import (
    PDFLexer, PDFLexError, Token, TokenType,
    token_is_number, token_is_name, token_is_string
)


def lex(data):
    return PDFLexer(data).tokenize()


def num(value):
    return Token(TokenType.NUMBER, value)


@pytest.mark.parametrize("value", [0, 1, 6, 42, 1234567])
def test_single_integer(value):
    tokens = lex(str(value).encode('ascii'))
    assert tokens == [num(value)]


def test_integer_queue_flushes_in_order():
    assert lex(b"1 2 3 4 5") == [num(1), num(2), num(3), num(4), num(5)]


def test_object_header():
    assert lex(b"1 2 obj\n") == [Token(TokenType.OBJECT_START, (1, 2))]


def test_reference():
    assert lex(b"4 0 R") == [Token(TokenType.REF, (4, 0))]


def test_reference_after_extra_integer():
    assert lex(b"1 2 3 R") == [num(1), Token(TokenType.REF, (2, 3))]


def test_negative_number():
    tokens = lex(b"-1")
    assert tokens == [num(-1.0)]
    assert tokens[0].value == -1


def test_negative_number_is_never_pending():
    tokens = lex(b"5 -1 2 0 R")
    assert tokens == [num(5), num(-1), Token(TokenType.REF, (2, 0))]


def test_decimal_flushes_pending_integers():
    assert lex(b"1.5 2 3 4") == [num(1.5), num(2), num(3), num(4)]
    assert lex(b"1 0 0 -1 0 841.89105") == [num(1), num(0), num(0), num(-1), num(0), num(841.89105)]


def test_malformed_number():
    with pytest.raises(PDFLexError):
        lex(b"1.2.3")


def test_header_without_enough_integers():
    with pytest.raises(PDFLexError):
        lex(b"3 R")
    with pytest.raises(PDFLexError):
        lex(b"obj\n")


def test_pending_integers_flushed_before_structural_tokens():
    tokens = lex(b"[1 2] << /a 3 >>")
    assert [t.type for t in tokens] == [
        TokenType.LIST_START, TokenType.NUMBER, TokenType.NUMBER, TokenType.LIST_END,
        TokenType.DICT_START, TokenType.KEY, TokenType.NUMBER, TokenType.DICT_END,
    ]
    assert [t.value for t in tokens if t.type == TokenType.NUMBER] == [1, 2, 3]


def test_comment_is_kept_out_of_token_stream():
    lexer = PDFLexer(b"%PDF-1.4\n7 % trailing note\n")
    assert lexer.tokenize() == [num(7)]
    assert lexer.comments == [(0, b'PDF-1.4'), (11, b' trailing note')]


def test_literal_string_with_escaped_parentheses():
    assert lex(rb"(a\)b\(c)") == [Token(TokenType.STRING, b'a)b(c')]


def test_literal_string_balanced_parentheses():
    assert lex(b"(a(b)c)") == [Token(TokenType.STRING, b'a(b)c')]


def test_literal_string_keeps_other_escapes_verbatim():
    assert lex(rb"(a\nb\\c)") == [Token(TokenType.STRING, b'a\\nb\\c')]


def test_literal_string_allows_non_ascii():
    assert lex(b"(\xff\xfe)") == [Token(TokenType.STRING, b'\xff\xfe')]


def test_unterminated_string():
    with pytest.raises(PDFLexError):
        lex(b"(abc")


def test_hex_string():
    assert lex(b"<200d0a>") == [Token(TokenType.BYTES, b' \r\n')]
    assert lex(b"<48 65 6C>") == [Token(TokenType.BYTES, b'Hel')]


def test_hex_string_with_odd_digit_count_is_rejected():
    with pytest.raises(PDFLexError):
        lex(b"<abc>")


def test_hex_string_invalid_digit():
    with pytest.raises(PDFLexError):
        lex(b"<zz>")


def test_names():
    assert lex(b"/Type/Page") == [Token(TokenType.KEY, 'Type'), Token(TokenType.KEY, 'Page')]
    assert lex(b"/A#20B") == [Token(TokenType.KEY, 'A B')]


def test_keywords():
    assert lex(b"true false null endobj") == [
        Token(TokenType.BOOL, True),
        Token(TokenType.BOOL, False),
        Token(TokenType.NULL, None),
        Token(TokenType.OBJECT_END),
    ]


def test_unknown_keyword_is_an_error():
    with pytest.raises(PDFLexError) as excinfo:
        lex(b"1 0 foo")
    assert excinfo.value.pos == 4


def test_non_ascii_byte_reports_position():
    with pytest.raises(PDFLexError) as excinfo:
        lex(b"1 \xff")
    assert excinfo.value.pos == 2


def test_stray_closing_bracket_characters():
    with pytest.raises(PDFLexError):
        lex(b"1 > 2")
    with pytest.raises(PDFLexError):
        lex(b")")


def test_stream_payload_read_raw():
    lexer = PDFLexer(b"<< /Length 3 >>\nstream\n\xff\x00a\nendstream\nendobj\n")
    types = [lexer.next_token().type for _ in range(5)]
    assert types == [
        TokenType.DICT_START, TokenType.KEY, TokenType.NUMBER,
        TokenType.DICT_END, TokenType.STREAM_START,
    ]
    assert lexer.read_raw(3) == b'\xff\x00a'
    assert lexer.next_token() == Token(TokenType.STREAM_END)
    assert lexer.next_token() == Token(TokenType.OBJECT_END)
    assert lexer.next_token() is None


def test_stream_keyword_accepts_crlf():
    lexer = PDFLexer(b"stream\r\nab")
    assert lexer.next_token() == Token(TokenType.STREAM_START)
    assert lexer.read_raw(2) == b'ab'


def test_stream_keyword_requires_end_of_line():
    with pytest.raises(PDFLexError):
        lex(b"stream abc")


def test_xref_and_read_line():
    lexer = PDFLexer(b"xref\r\n0 1\r\n0000000000 65535 f \r\ntrailer\n")
    assert lexer.peek_is(TokenType.XREF)
    assert lexer.next_token() == Token(TokenType.XREF)
    assert lexer.read_line() == '0 1'
    assert lexer.read_line() == '0000000000 65535 f '
    assert lexer.read_line() == 'trailer'
    assert lexer.read_line() is None


def test_peek_does_not_consume():
    lexer = PDFLexer(b"4 0 R /Key")
    assert not lexer.peek_is(TokenType.KEY)
    assert lexer.next_token() == Token(TokenType.REF, (4, 0))
    assert lexer.peek_is(TokenType.KEY)
    assert lexer.next_token() == Token(TokenType.KEY, 'Key')
    assert not lexer.peek_is(TokenType.KEY)


def test_only_one_token_of_pushback():
    lexer = PDFLexer(b"1")
    lexer.push_back(Token(TokenType.NULL))
    with pytest.raises(RuntimeError):
        lexer.push_back(Token(TokenType.NULL))


def test_token_positions():
    tokens = lex(b"  12 0 obj\n/Name")
    assert tokens[0].pos == 2
    assert tokens[1].pos == 11


def test_token_predicates():
    assert token_is_number(num(3), 3)
    assert token_is_number(num(3.0), 3)
    assert not token_is_number(Token(TokenType.KEY, 'Type'), 3)
    assert not token_is_number(None, 3)
    assert token_is_name(Token(TokenType.KEY, 'Type'), 'Type')
    assert not token_is_name(Token(TokenType.STRING, b'Type'), 'Type')
    assert token_is_string(Token(TokenType.STRING, b'ab'), b'ab')
    assert token_is_string(Token(TokenType.BYTES, b'ab'), b'ab')
