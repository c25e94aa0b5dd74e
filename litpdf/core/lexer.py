"""
PDF Lexer - 바이트 스트림 토크나이저

목표:
1. 문서 전체 바이트를 토큰 스트림으로 변환 (pull 방식)
2. 숫자 / 객체 헤더(N G obj) / 참조(N G R) 모호성 해소 (LL(2))
3. 한 토큰 lookahead / pushback 지원
4. 스트림 데이터, xref 라인은 토큰화하지 않고 직접 읽기
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Iterator, List, Optional, Tuple

from .errors import PDFLexError


class TokenType(Enum):
    """PDF 토큰 타입"""
    NUMBER = "number"
    STRING = "string"            # (hello)
    BYTES = "bytes"              # <48656C6C6F>
    KEY = "key"                  # /Type
    BOOL = "bool"
    NULL = "null"
    DICT_START = "dict_start"    # <<
    DICT_END = "dict_end"        # >>
    LIST_START = "list_start"    # [
    LIST_END = "list_end"        # ]
    STREAM_START = "stream_start"
    STREAM_END = "stream_end"
    OBJECT_START = "object_start"  # 1 0 obj
    OBJECT_END = "object_end"
    REF = "ref"                  # 1 0 R
    XREF = "xref"
    OPERATOR = "operator"        # Content Stream 전용: Tj, BT, ET


@dataclass
class Token:
    """토큰 (pos는 비교에서 제외)"""
    type: TokenType
    value: Any = None
    pos: int = field(default=0, compare=False)

    def __str__(self):
        if self.type == TokenType.KEY:
            return f"/{self.value}"
        if self.type in (TokenType.OBJECT_START, TokenType.REF):
            return f"{self.type.name}{self.value}"
        if self.value is None and self.type != TokenType.NULL:
            return self.type.name
        return f"{self.type.name}({self.value!r})"


# 토큰 비교 헬퍼 (Token == 3, Token == "Type" 대신)

def token_is_number(token: Optional[Token], value: float) -> bool:
    return token is not None and token.type == TokenType.NUMBER and token.value == value


def token_is_name(token: Optional[Token], name: str) -> bool:
    return token is not None and token.type == TokenType.KEY and token.value == name


def token_is_string(token: Optional[Token], value: bytes) -> bool:
    return (token is not None
            and token.type in (TokenType.STRING, TokenType.BYTES)
            and token.value == value)


class PDFLexer:
    """PDF 토크나이저 - 바이트 스트림을 토큰으로 변환"""

    # 구분자 문자
    WHITESPACE = b' \t\n\r\x00\x0c'
    DELIMITERS = b'()<>[]{}/%'
    HEX_DIGITS = b'0123456789ABCDEFabcdef'
    NUMBER_CHARS = b'+-.0123456789'

    # obj / R 헤더 판정에 필요한 최대 대기 정수 개수
    PENDING_LIMIT = 2

    # 알파벳 외에 키워드를 시작할 수 있는 문자 (Content Stream에서 확장)
    KEYWORD_START = b''

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.length = len(data)
        self.comments: List[Tuple[int, bytes]] = []

        self._pending: Deque[Tuple[int, int]] = deque()  # (정수값, 위치)
        self._ready: Deque[Token] = deque()
        self._pushed: Optional[Token] = None

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def tokenize(self) -> List[Token]:
        """전체 토큰화"""
        return list(self)

    # ------------------------------------------------------------------
    # lookahead
    # ------------------------------------------------------------------

    def peek_is(self, token_type: TokenType) -> bool:
        """다음 토큰 타입 확인 (소비하지 않음)"""
        token = self.next_token()
        if token is None:
            return False
        self.push_back(token)
        return token.type == token_type

    def push_back(self, token: Token):
        """토큰 하나 되돌리기"""
        if self._pushed is not None:
            raise RuntimeError("Only one token of pushback is supported")
        self._pushed = token

    # ------------------------------------------------------------------
    # 토큰 읽기
    # ------------------------------------------------------------------

    def next_token(self) -> Optional[Token]:
        """다음 토큰 읽기 (입력 끝이면 None)"""
        if self._pushed is not None:
            token = self._pushed
            self._pushed = None
            return token

        while True:
            if self._ready:
                return self._ready.popleft()

            self.skip_whitespace()
            if self.pos >= self.length:
                self._flush_pending()
                if self._ready:
                    return self._ready.popleft()
                return None

            self._read_lexeme()

    def skip_whitespace(self):
        """공백 문자와 주석 스킵 (주석은 comments에 보관)"""
        while self.pos < self.length:
            ch = self.data[self.pos:self.pos + 1]
            if ch in self.WHITESPACE:
                self.pos += 1
            elif ch == b'%':
                start = self.pos
                while self.pos < self.length and self.data[self.pos:self.pos + 1] not in b'\r\n':
                    self.pos += 1
                self.comments.append((start, self.data[start + 1:self.pos]))
            else:
                break

    def _emit(self, token: Token):
        """대기 중인 정수를 먼저 내보낸 뒤 토큰 추가"""
        self._flush_pending()
        self._ready.append(token)

    def _flush_pending(self):
        while self._pending:
            value, pos = self._pending.popleft()
            self._ready.append(Token(TokenType.NUMBER, value, pos))

    def _push_integer(self, value: int, pos: int):
        self._pending.append((value, pos))
        if len(self._pending) > self.PENDING_LIMIT:
            old_value, old_pos = self._pending.popleft()
            self._ready.append(Token(TokenType.NUMBER, old_value, old_pos))

    def _take_header(self, keyword: str, start_pos: int) -> Tuple[int, int, int]:
        """대기 정수 두 개를 (major, minor, 위치)로 소비"""
        if len(self._pending) < 2:
            raise PDFLexError(f"'{keyword}' without object and generation numbers", start_pos)
        while len(self._pending) > 2:
            value, pos = self._pending.popleft()
            self._ready.append(Token(TokenType.NUMBER, value, pos))
        major, pos = self._pending.popleft()
        minor, _ = self._pending.popleft()
        return major, minor, pos

    def _read_lexeme(self):
        """렉심 하나를 읽어 _ready 또는 _pending에 넣음"""
        start_pos = self.pos
        byte = self.data[self.pos]
        ch = self.data[self.pos:self.pos + 1]

        if byte >= 0x80:
            raise PDFLexError(f"Non-ASCII byte 0x{byte:02x}", start_pos)

        # Dictionary 시작 / Hex 문자열
        if ch == b'<':
            if self.data[self.pos:self.pos + 2] == b'<<':
                self.pos += 2
                self._emit(Token(TokenType.DICT_START, None, start_pos))
            else:
                self._emit(self._read_hex_string(start_pos))
            return

        if ch == b'>':
            if self.data[self.pos:self.pos + 2] == b'>>':
                self.pos += 2
                self._emit(Token(TokenType.DICT_END, None, start_pos))
                return
            raise PDFLexError("Unexpected '>'", start_pos)

        # List
        if ch == b'[':
            self.pos += 1
            self._emit(Token(TokenType.LIST_START, None, start_pos))
            return
        if ch == b']':
            self.pos += 1
            self._emit(Token(TokenType.LIST_END, None, start_pos))
            return

        # Name
        if ch == b'/':
            self._emit(self._read_name(start_pos))
            return

        # String
        if ch == b'(':
            self._emit(self._read_string(start_pos))
            return

        # Number
        if ch in self.NUMBER_CHARS:
            self._read_number(start_pos)
            return

        # Keyword
        if ch.isalpha() or (self.KEYWORD_START and ch in self.KEYWORD_START):
            word = self._read_regular()
            token = self._keyword_token(word, start_pos)
            if token is not None:
                self._emit(token)
            return

        raise PDFLexError(f"Unexpected character {ch!r}", start_pos)

    def _read_regular(self) -> str:
        """공백/구분자가 아닌 문자열 읽기"""
        start = self.pos
        while self.pos < self.length:
            byte = self.data[self.pos]
            ch = self.data[self.pos:self.pos + 1]
            if ch in self.WHITESPACE or ch in self.DELIMITERS:
                break
            if byte >= 0x80:
                raise PDFLexError(f"Non-ASCII byte 0x{byte:02x}", self.pos)
            self.pos += 1
        return self.data[start:self.pos].decode('ascii')

    def _read_name(self, start_pos: int) -> Token:
        """Name 토큰 읽기: /Type, /Pages, etc."""
        self.pos += 1  # '/' 스킵
        raw = self._read_regular().encode('ascii')
        name = b''
        i = 0
        while i < len(raw):
            # #XX 이스케이프 처리
            hex_val = raw[i + 1:i + 3]
            if raw[i:i + 1] == b'#' and len(hex_val) == 2 and all(c in self.HEX_DIGITS for c in hex_val):
                name += bytes([int(hex_val, 16)])
                i += 3
                continue
            name += raw[i:i + 1]
            i += 1
        return Token(TokenType.KEY, name.decode('latin-1'), start_pos)

    def _read_string(self, start_pos: int) -> Token:
        """리터럴 문자열 읽기: (Hello World)

        \\( \\) \\\\ 는 해당 문자로, 그 외 백슬래시 시퀀스는 그대로 보존
        """
        self.pos += 1  # '(' 스킵
        result = b''
        depth = 1  # 괄호 중첩 추적

        while self.pos < self.length:
            ch = self.data[self.pos:self.pos + 1]

            if ch == b'\\':
                esc = self.data[self.pos + 1:self.pos + 2]
                if esc in (b'(', b')', b'\\'):
                    result += esc
                    self.pos += 2
                    continue
                result += ch
                self.pos += 1
            elif ch == b'(':
                depth += 1
                result += ch
                self.pos += 1
            elif ch == b')':
                depth -= 1
                self.pos += 1
                if depth == 0:
                    return Token(TokenType.STRING, result, start_pos)
                result += ch
            else:
                result += ch
                self.pos += 1

        raise PDFLexError("Unterminated string literal", start_pos)

    def _read_hex_string(self, start_pos: int) -> Token:
        """16진수 문자열 읽기: <48656C6C6F>"""
        self.pos += 1  # '<' 스킵
        hex_str = b''

        while self.pos < self.length:
            ch = self.data[self.pos:self.pos + 1]
            if ch == b'>':
                self.pos += 1
                # 홀수 길이는 거부 (0 패딩하지 않음)
                if len(hex_str) % 2 == 1:
                    raise PDFLexError("Odd number of hex digits in byte string", start_pos)
                return Token(TokenType.BYTES, bytes.fromhex(hex_str.decode('ascii')), start_pos)
            if ch in self.WHITESPACE:
                self.pos += 1
                continue
            if ch in self.HEX_DIGITS:
                hex_str += ch
                self.pos += 1
            else:
                raise PDFLexError(f"Invalid hex character {ch!r}", self.pos)

        raise PDFLexError("Unterminated hex string", start_pos)

    def _read_number(self, start_pos: int):
        """숫자 읽기

        부호/소수점 없는 정수는 obj / R 헤더일 수 있으므로 대기열에 넣음
        """
        while self.pos < self.length and self.data[self.pos:self.pos + 1] in self.NUMBER_CHARS:
            self.pos += 1
        text = self.data[start_pos:self.pos].decode('ascii')

        if text.isdigit():
            self._push_integer(int(text), start_pos)
            return

        try:
            value = float(text) if '.' in text else int(text)
        except ValueError:
            raise PDFLexError(f"Malformed number {text!r}", start_pos) from None
        self._emit(Token(TokenType.NUMBER, value, start_pos))

    def _skip_eol(self) -> bool:
        """줄 끝(\\r\\n 또는 \\n) 하나 소비"""
        if self.data[self.pos:self.pos + 2] == b'\r\n':
            self.pos += 2
            return True
        if self.data[self.pos:self.pos + 1] == b'\n':
            self.pos += 1
            return True
        return False

    def _keyword_token(self, word: str, start_pos: int) -> Optional[Token]:
        """키워드 읽기: true, false, null, obj, endobj, stream, etc."""
        if word == 'true':
            return Token(TokenType.BOOL, True, start_pos)
        if word == 'false':
            return Token(TokenType.BOOL, False, start_pos)
        if word == 'null':
            return Token(TokenType.NULL, None, start_pos)

        if word in ('obj', 'R'):
            major, minor, pos = self._take_header(word, start_pos)
            token_type = TokenType.OBJECT_START if word == 'obj' else TokenType.REF
            self._ready.append(Token(token_type, (major, minor), pos))
            return None

        if word == 'endobj':
            return Token(TokenType.OBJECT_END, None, start_pos)

        if word == 'stream':
            # 'stream' 바로 뒤의 EOL 다음부터 데이터
            if not self._skip_eol():
                raise PDFLexError("'stream' keyword not followed by end of line", self.pos)
            return Token(TokenType.STREAM_START, None, start_pos)

        if word == 'endstream':
            return Token(TokenType.STREAM_END, None, start_pos)

        if word == 'xref':
            while self.data[self.pos:self.pos + 1] in (b' ', b'\t'):
                self.pos += 1
            self._skip_eol()
            return Token(TokenType.XREF, None, start_pos)

        raise PDFLexError(f"Unrecognized keyword {word!r}", start_pos)

    # ------------------------------------------------------------------
    # 토큰화하지 않는 직접 읽기
    # ------------------------------------------------------------------

    def _check_drained(self):
        if self._pushed is not None or self._ready or self._pending:
            raise RuntimeError("Raw read with buffered tokens")

    def read_raw(self, count: int) -> bytes:
        """count 바이트를 그대로 읽기 (스트림 데이터)"""
        self._check_drained()
        result = self.data[self.pos:self.pos + count]
        self.pos += len(result)
        return result

    def read_line(self) -> Optional[str]:
        """ASCII 한 줄 읽기 (xref 섹션용, 입력 끝이면 None)"""
        self._check_drained()
        if self.pos >= self.length:
            return None

        end = self.data.find(b'\n', self.pos)
        if end == -1:
            end = self.length
        raw = self.data[self.pos:end]
        for i, byte in enumerate(raw):
            if byte >= 0x80:
                raise PDFLexError(f"Non-ASCII byte 0x{byte:02x}", self.pos + i)

        self.pos = end + 1
        return raw.rstrip(b'\r').decode('ascii')
