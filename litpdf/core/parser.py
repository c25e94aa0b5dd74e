"""
PDF Parser - 객체 파싱과 문서 조립

목표:
1. 토큰을 값 트리로 변환 (dict, list, number, string, name, ref, ...)
2. 스트림 데이터 추출 (Length 만큼, FlateDecode면 압축 해제)
3. 파일 순서대로 객체를 읽다가 xref를 만나면 trailer 파싱 후 종료
"""

import logging
import re
from typing import Any, Dict, List

from .document import ObjectId, PDFDocument, PDFId, PDFObject, PDFRef, XRefEntry
from .errors import PDFSemanticError, PDFSyntaxError
from .lexer import PDFLexer, Token, TokenType
from .stream_decoder import StreamDecoder

logger = logging.getLogger(__name__)

# 값으로 그대로 쓰는 토큰
SCALAR_TOKENS = (
    TokenType.NUMBER, TokenType.STRING, TokenType.BYTES,
    TokenType.KEY, TokenType.BOOL,
)


class ObjectParser:
    """토큰을 파싱해서 값으로 변환 (재귀 하강)"""

    # dict / list 중첩 한도
    MAX_NESTING_DEPTH = 256

    def __init__(self, lexer: PDFLexer):
        self.lexer = lexer

    def parse_value(self, depth: int = 0) -> Any:
        """값 하나 파싱"""
        token = self.lexer.next_token()
        if token is None:
            raise PDFSyntaxError("Unexpected end of input, expected a value")
        return self._value_from_token(token, depth)

    def _value_from_token(self, token: Token, depth: int) -> Any:
        # Dictionary
        if token.type == TokenType.DICT_START:
            return self._parse_dict(token, depth + 1)

        # List
        if token.type == TokenType.LIST_START:
            return self._parse_list(token, depth + 1)

        # 기본 타입들
        if token.type in SCALAR_TOKENS:
            return token.value
        if token.type == TokenType.NULL:
            return None
        if token.type == TokenType.REF:
            return PDFRef(*token.value)

        raise PDFSyntaxError("Unexpected token where a value was expected", token)

    def _check_depth(self, token: Token, depth: int):
        if depth > self.MAX_NESTING_DEPTH:
            raise PDFSyntaxError(f"Nesting deeper than {self.MAX_NESTING_DEPTH} levels", token)

    def _parse_dict(self, start: Token, depth: int) -> Dict[str, Any]:
        """Dictionary 파싱 (중복 키는 마지막 값)"""
        self._check_depth(start, depth)
        result = {}

        while True:
            token = self.lexer.next_token()

            if token is None:
                raise PDFSyntaxError("Unexpected end of input in dictionary")

            if token.type == TokenType.DICT_END:
                break

            if token.type != TokenType.KEY:
                raise PDFSyntaxError("Expected key in dictionary", token)

            value = self.parse_value(depth)
            if token.value == 'ID':
                value = _promote_ids(value)
            result[token.value] = value

        return result

    def _parse_list(self, start: Token, depth: int) -> List[Any]:
        """List 파싱"""
        self._check_depth(start, depth)
        result = []

        while True:
            token = self.lexer.next_token()

            if token is None:
                raise PDFSyntaxError("Unexpected end of input in list")

            if token.type == TokenType.LIST_END:
                break

            result.append(self._value_from_token(token, depth))

        return result

    def parse_stream(self, stream_dict: Dict[str, Any],
                     objects: Dict[ObjectId, PDFObject]) -> bytes:
        """
        Stream 데이터 읽기 (STREAM_START 토큰 소비 직후 호출)

        Args:
            stream_dict: 스트림 객체의 딕셔너리
            objects: 지금까지 파싱된 객체 (Length가 참조인 경우)

        Returns:
            FlateDecode면 압축 해제된 데이터, 아니면 원본 바이트
        """
        length = stream_dict.get('Length')

        # Length가 참조인 경우
        if isinstance(length, PDFRef):
            target = objects.get(length.id)
            if target is not None:
                length = target.value
            else:
                # 아직 파싱 안됨 - endstream으로 찾기
                length = self._length_until_endstream(length)

        if isinstance(length, float) and length.is_integer():
            length = int(length)
        if isinstance(length, bool) or not isinstance(length, int):
            raise PDFSemanticError(f"Stream dictionary has no usable /Length: {length!r}")
        if length < 0:
            raise PDFSemanticError(f"Negative stream /Length: {length}")

        data = self.lexer.read_raw(length)
        if len(data) < length:
            raise PDFSemanticError(
                f"Stream /Length {length} runs past end of input ({len(data)} bytes left)")

        token = self.lexer.next_token()
        if token is None or token.type != TokenType.STREAM_END:
            raise PDFSyntaxError("Expected 'endstream' after stream data", token)

        return StreamDecoder.decode(data, stream_dict.get('Filter'))

    def _length_until_endstream(self, ref: PDFRef) -> Any:
        data = self.lexer.data
        start = self.lexer.pos
        end = data.find(b'endstream', start)
        if end == -1:
            return ref

        # endstream 앞의 EOL 하나만 제거 (나머지는 데이터)
        if data[start:end].endswith(b'\r\n'):
            end -= 2
        elif end > start and data[end - 1:end] in (b'\r', b'\n'):
            end -= 1
        logger.debug("Length %r not parsed yet, using %d bytes up to endstream", ref, end - start)
        return end - start


def _promote_ids(value: Any) -> Any:
    """/ID 배열의 16바이트 문자열 → PDFId"""
    if not isinstance(value, list):
        return value
    return [
        PDFId(int.from_bytes(item, 'big')) if isinstance(item, bytes) and len(item) == 16 else item
        for item in value
    ]


class PDFParser:
    """PDF 파서 - 파일 순서대로 객체를 읽어 문서 조립"""

    def __init__(self, data: bytes):
        self.data = data
        self.lexer = PDFLexer(data)
        self.object_parser = ObjectParser(self.lexer)
        self.document = PDFDocument()

    def parse(self) -> PDFDocument:
        """PDF 문서 전체 파싱"""
        # 1. 객체들 (xref 키워드를 만날 때까지)
        while not self.lexer.peek_is(TokenType.XREF):
            self._parse_object()

        # 2. XRef 섹션과 Trailer
        self.lexer.next_token()
        self._parse_xref_section()
        self._parse_trailer()

        # 3. 헤더 (%PDF-X.X 주석)
        self.document.comments = self.lexer.comments
        self._parse_header()

        logger.debug("Parsed %d objects, trailer keys: %s",
                     len(self.document.objects), sorted(self.document.trailer))
        return self.document

    def _parse_header(self):
        """첫 주석에서 PDF 버전 추출"""
        if not self.document.comments:
            return
        match = re.match(rb'PDF-(\d+\.\d+)', self.document.comments[0][1])
        if match:
            self.document.version = match.group(1).decode('ascii')

    def _parse_object(self):
        """N G obj ... endobj 하나 파싱"""
        token = self.lexer.next_token()
        if token is None:
            raise PDFSemanticError("Unexpected end of input: no xref section and trailer")
        if token.type != TokenType.OBJECT_START:
            raise PDFSyntaxError("Expected object header", token)

        obj_num, gen_num = token.value
        value = self.object_parser.parse_value()

        # stream 체크
        stream = b''
        if self.lexer.peek_is(TokenType.STREAM_START):
            start = self.lexer.next_token()
            if not isinstance(value, dict):
                raise PDFSyntaxError(f"Stream in object {obj_num} {gen_num} without dictionary", start)
            stream = self.object_parser.parse_stream(value, self.document.objects)

        end = self.lexer.next_token()
        if end is None or end.type != TokenType.OBJECT_END:
            raise PDFSyntaxError(f"Expected 'endobj' for object {obj_num} {gen_num}", end)

        if (obj_num, gen_num) in self.document.objects:
            logger.debug("Duplicate object %d %d, keeping the later one", obj_num, gen_num)

        self.document.objects[(obj_num, gen_num)] = PDFObject(obj_num, gen_num, value, stream)
        logger.debug("Object %d %d at %d (%d stream bytes)", obj_num, gen_num, token.pos, len(stream))

    def _parse_xref_section(self):
        """xref 라인을 trailer 라인까지 읽기"""
        current = None

        while True:
            line = self.lexer.read_line()
            if line is None:
                raise PDFSemanticError("Missing 'trailer' after xref section")

            fields = line.split()
            if line.strip() == 'trailer':
                return

            # 섹션 헤더: 시작번호 개수
            if len(fields) == 2 and all(f.isdigit() for f in fields):
                current = int(fields[0])
                continue

            # 항목: OOOOOOOOOO GGGGG n/f
            if (current is not None and len(fields) == 3
                    and fields[0].isdigit() and fields[1].isdigit() and fields[2] in ('n', 'f')):
                self.document.xref[current] = XRefEntry(
                    offset=int(fields[0]),
                    gen_num=int(fields[1]),
                    in_use=(fields[2] == 'n'),
                )
                current += 1
                continue

            logger.debug("Skipping xref line %r", line)

    def _parse_trailer(self):
        """Trailer dictionary 파싱"""
        if not self.lexer.peek_is(TokenType.DICT_START):
            raise PDFSyntaxError("Expected trailer dictionary", self.lexer.next_token())
        self.document.trailer = self.object_parser.parse_value()
