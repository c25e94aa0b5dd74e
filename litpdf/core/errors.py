"""
PDF 엔진 예외 계층

모든 예외는 ValueError를 상속 (기존 호출부의 except ValueError 유지)

- PDFLexError: 바이트 단위 토큰화 실패 (비 ASCII, 인식 불가 시퀀스)
- PDFSyntaxError: 문법 오류 (기대한 토큰이 아님)
- PDFSemanticError: 필수 항목 누락 (Length, trailer 등)
- PDFDecodeError: 압축 해제 / CMap 디코딩 실패
"""

from typing import Any, Optional


class PDFError(ValueError):
    """litpdf 예외 기본 클래스"""


class PDFLexError(PDFError):
    """토크나이저 오류 (pos: 문제 바이트 위치)"""

    def __init__(self, message: str, pos: int):
        self.pos = pos
        super().__init__(f"{message} at position {pos}")


class PDFSyntaxError(PDFError):
    """문법 오류 (token: 실제로 만난 토큰, 입력 끝이면 None)"""

    def __init__(self, message: str, token: Optional[Any] = None):
        self.token = token
        if token is not None:
            message = f"{message}, got {token}"
        super().__init__(message)


class PDFSemanticError(PDFError):
    """필수 딕셔너리 항목 누락, trailer 없음 등"""


class PDFDecodeError(PDFError):
    """스트림 압축 해제 또는 문자 코드 디코딩 실패"""
