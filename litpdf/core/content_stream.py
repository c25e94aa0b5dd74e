"""
PDF Content Stream Parser

Content Stream의 연산자들을 파싱하고 텍스트 상태를 추적

처리하는 연산자:
- BT/ET: 텍스트 블록 시작/끝
- Tf: 폰트 크기 설정 (폰트 메트릭은 사용하지 않음)
- Tm: 위치 설정 (이동 성분 e, f만 사용)
- Td: 상대 위치 이동
- TJ: 텍스트 출력 (커닝 숫자 포함 배열)
- Tj, ', ": 단일 문자열 출력 (show_strings=True일 때만)

그 외 연산자는 무시
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import PDFDecodeError, PDFSyntaxError
from .lexer import PDFLexer, Token, TokenType

logger = logging.getLogger(__name__)


class ContentStreamLexer(PDFLexer):
    """Content Stream 토크나이저

    문서 토크나이저와 같은 문법, 키워드 대신 연산자를 만듦
    """

    # ' 와 " 도 연산자 (T* + Tj 단축형)
    KEYWORD_START = b"'\""

    def _keyword_token(self, word: str, start_pos: int) -> Optional[Token]:
        if word == 'true':
            return Token(TokenType.BOOL, True, start_pos)
        if word == 'false':
            return Token(TokenType.BOOL, False, start_pos)
        if word == 'null':
            return Token(TokenType.NULL, None, start_pos)
        return Token(TokenType.OPERATOR, word, start_pos)


@dataclass
class Operation:
    """연산자 + 앞선 피연산자 토큰들 (배열/딕셔너리는 구분자 토큰 그대로)"""
    op: str
    operands: List[Token] = field(default_factory=list)


class OperationParser:
    """토큰 스트림을 Operation 단위로 묶음"""

    def __init__(self, data: bytes):
        self.lexer = ContentStreamLexer(data)

    def __iter__(self) -> Iterator[Operation]:
        operands: List[Token] = []
        for token in self.lexer:
            if token.type == TokenType.OPERATOR:
                yield Operation(token.value, operands)
                operands = []
            else:
                operands.append(token)

        if operands:
            logger.debug("Dropping %d trailing operands without operator", len(operands))


def parse_operations(data: bytes) -> List[Operation]:
    """Content Stream 전체를 Operation 목록으로"""
    return list(OperationParser(data))


@dataclass
class TextRun:
    """위치가 정해진 텍스트 조각"""
    x: float
    y: float
    text: str
    font_size: float


@dataclass
class TextState:
    """텍스트 상태 머신 (BT에서 생성, ET에서 폐기)"""
    x: float = 0.0
    y: float = 0.0
    font_size: float = 0.0
    runs: List[TextRun] = field(default_factory=list)

    def push(self, text: str):
        self.runs.append(TextRun(self.x, self.y, text, self.font_size))


def decode_string(raw: bytes, code_map: Optional[Dict[int, str]] = None) -> str:
    """
    문자열 바이트를 텍스트로 디코딩

    code_map이 있으면 2바이트 big-endian 코드 단위로 조회,
    없으면 이미 디코딩된 텍스트로 간주 (latin-1)
    """
    if not code_map:
        return raw.decode('latin-1')

    if len(raw) % 2 == 1:
        raise PDFDecodeError(f"String of {len(raw)} bytes is not a sequence of 2-byte codes")

    result = []
    for i in range(0, len(raw), 2):
        code = (raw[i] << 8) | raw[i + 1]
        if code not in code_map:
            raise PDFDecodeError(f"Character code 0x{code:04X} not in code map")
        result.append(code_map[code])
    return ''.join(result)


class TextLayoutEngine:
    """Operation을 해석해서 TextRun 생성"""

    LAYOUT_OPS = ('Tf', 'Tm', 'Td', 'TJ')
    STRING_OPS = ('Tj', "'", '"')

    def __init__(self, code_map: Optional[Dict[int, str]] = None, show_strings: bool = False):
        """
        Args:
            code_map: 16비트 문자 코드 → 유니코드 문자 (없으면 원본 바이트 사용)
            show_strings: Tj / ' / " 문자열도 출력 (텍스트 덤프용)
        """
        self.code_map = code_map or {}
        self.show_strings = show_strings
        self.state: Optional[TextState] = None

    def layout(self, operations: Iterable[Operation]) -> Iterator[List[TextRun]]:
        """텍스트 블록(BT..ET)마다 TextRun 목록 생성"""
        for operation in operations:
            runs = self.feed(operation)
            if runs is not None:
                yield runs

    def runs(self, operations: Iterable[Operation]) -> List[TextRun]:
        """모든 텍스트 블록의 TextRun을 순서대로"""
        result = []
        for runs in self.layout(operations):
            result.extend(runs)
        return result

    def feed(self, operation: Operation) -> Optional[List[TextRun]]:
        """
        연산 하나 실행

        Returns:
            ET면 해당 블록의 TextRun 목록, 그 외에는 None
        """
        op = operation.op

        if op == 'BT':
            self.state = TextState()
            return None

        if op == 'ET':
            runs = self.state.runs if self.state else []
            self.state = None
            return runs

        if op not in self.LAYOUT_OPS and not (self.show_strings and op in self.STRING_OPS):
            return None

        # BT 없이 시작된 텍스트 연산은 새 상태에서
        if self.state is None:
            self.state = TextState()
        state = self.state

        if op == 'Tf':  # /F1 12 Tf
            numbers = self._numbers(operation, 1)
            state.font_size = numbers[-1]

        elif op == 'Tm':  # a b c d e f Tm (회전/배율 무시)
            numbers = self._numbers(operation, 6)
            state.x, state.y = numbers[-2], numbers[-1]

        elif op == 'Td':  # tx ty Td
            numbers = self._numbers(operation, 2)
            state.x += numbers[-2]
            state.y += numbers[-1]

        elif op == 'TJ':  # [(string) num (string) ...] TJ
            self._show_text_array(operation)

        else:  # (string) Tj, (string) ', aw ac (string) "
            self._show_string(operation)

        return None

    def _numbers(self, operation: Operation, count: int) -> List[float]:
        """숫자 피연산자 (최소 count개)"""
        numbers = [t.value for t in operation.operands if t.type == TokenType.NUMBER]
        if len(numbers) < count:
            raise PDFSyntaxError(
                f"'{operation.op}' expects {count} numeric operands, got {len(numbers)}")
        return numbers

    def _show_text_array(self, operation: Operation):
        """TJ 배열 처리

        숫자: 1/1000 텍스트 단위 커닝 (x -= n/1000 * 크기)
        문자열: 현재 위치에 출력 후 글자당 폰트 크기만큼 전진
        """
        state = self.state
        for item in operation.operands:
            if item.type == TokenType.NUMBER:
                state.x -= item.value / 1000 * state.font_size
            elif item.type in (TokenType.STRING, TokenType.BYTES):
                self._push_string(item.value)

    def _show_string(self, operation: Operation):
        """Tj 계열: 마지막 문자열 피연산자 하나 출력 (줄 이동은 추적하지 않음)"""
        strings = [t for t in operation.operands
                   if t.type in (TokenType.STRING, TokenType.BYTES)]
        if not strings:
            raise PDFSyntaxError(f"'{operation.op}' expects a string operand")
        self._push_string(strings[-1].value)

    def _push_string(self, raw: bytes):
        state = self.state
        text = decode_string(raw, self.code_map)
        state.push(text)
        state.x += len(text) * state.font_size
