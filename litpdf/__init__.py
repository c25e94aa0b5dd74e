"""
LitPDF - Lightweight PDF Structure Parser

PDF의 간접 객체 그래프, 페이지 트리, 폰트, 텍스트를 추출하는 라이브러리
- 외부 라이브러리 없이 순수 Python으로 구현
- 전통적인 xref 테이블 형식만 지원 (xref 스트림 / 객체 스트림 / 암호화 미지원)

사용법:
    from litpdf import parse_pdf, extract_text, extract_text_runs

    doc = parse_pdf('document.pdf')
    doc = parse_pdf(pdf_bytes)

    # 그래프 탐색
    doc.pages()
    doc.pages_kids()
    doc.fonts()
    doc.all_references()

    # 텍스트
    text = extract_text(doc, page_num=0)
    for run in extract_text_runs(doc, page_num=0):
        print(run.x, run.y, run.font_size, run.text)
"""
import logging
from typing import Dict, List, Optional, Union

from .core import (
    PDFParser, PDFDocument, PDFObject, PDFRef, PDFId, ReferenceInfo,
    PDFError, PDFLexError, PDFSyntaxError, PDFSemanticError, PDFDecodeError,
    Operation, TextLayoutEngine, TextRun, parse_operations, parse_bfchar
)

__version__ = '0.2.0'
__all__ = [
    # Core
    'parse_pdf', 'build_code_map', 'get_pages', 'get_page_count',
    'get_operations', 'extract_text_runs', 'extract_text', 'extract_all_text',
    'PDFParser', 'PDFDocument', 'PDFObject', 'PDFRef', 'PDFId', 'ReferenceInfo',
    'Operation', 'TextLayoutEngine', 'TextRun',
    # Errors
    'PDFError', 'PDFLexError', 'PDFSyntaxError', 'PDFSemanticError', 'PDFDecodeError',
]

logger = logging.getLogger(__name__)

# 같은 줄로 보는 y 차이
LINE_TOLERANCE = 1.0


# =============================================================================
# 문서
# =============================================================================

def parse_pdf(filepath_or_bytes: Union[str, bytes]) -> PDFDocument:
    """
    PDF 파일 또는 바이트를 파싱

    Args:
        filepath_or_bytes: 파일 경로 (str) 또는 PDF 데이터 (bytes)

    Returns:
        PDFDocument: 파싱된 PDF 문서 객체

    Example:
        doc = parse_pdf('document.pdf')
        doc = parse_pdf(pdf_bytes)
    """
    if isinstance(filepath_or_bytes, str):
        with open(filepath_or_bytes, 'rb') as f:
            data = f.read()
    else:
        data = filepath_or_bytes

    parser = PDFParser(data)
    return parser.parse()


def build_code_map(doc: PDFDocument) -> Dict[int, str]:
    """
    문서의 CMap 스트림들로 문자 코드 맵 구성

    /Type /CMap 스트림과 폰트 /ToUnicode 스트림의 bfchar 항목을 병합
    """
    code_map = {}
    seen = set()
    for obj in doc.cmap_streams_of_type('CMap') + doc.to_unicode_streams():
        if obj.id in seen:
            continue
        seen.add(obj.id)
        code_map.update(parse_bfchar(obj.stream))

    logger.debug("Code map: %d entries from %d CMap streams", len(code_map), len(seen))
    return code_map


def get_pages(doc: PDFDocument) -> List[PDFObject]:
    """Page 객체 목록 (두 단계 페이지 트리까지)"""
    return doc.page_list()


def get_page_count(doc: PDFDocument) -> int:
    """페이지 수 반환 (Pages /Count, 없으면 찾은 Page 수)"""
    pages = doc.pages()
    count = pages.get('Count') if pages else None
    if isinstance(count, int) and not isinstance(count, bool):
        return count
    return len(doc.page_list())


# =============================================================================
# Content Stream
# =============================================================================

def get_operations(doc: PDFDocument, page_num: int = 0) -> List[Operation]:
    """페이지 Content Stream의 연산 목록"""
    pages = get_pages(doc)
    if not 0 <= page_num < len(pages):
        return []

    content = doc.contents(pages[page_num])
    if not content:
        return []
    return parse_operations(content)


def extract_text_runs(doc: PDFDocument, page_num: int = 0,
                      code_map: Optional[Dict[int, str]] = None) -> List[TextRun]:
    """
    페이지에서 위치 정보와 함께 텍스트 추출

    Args:
        doc: PDFDocument 객체
        page_num: 페이지 번호 (0부터 시작)
        code_map: 문자 코드 맵 (None이면 문서의 CMap으로 구성)

    Returns:
        List[TextRun]: Content Stream 순서의 텍스트 조각 (x, y, text, font_size)
    """
    operations = get_operations(doc, page_num)
    if not operations:
        return []

    if code_map is None:
        code_map = build_code_map(doc)

    engine = TextLayoutEngine(code_map, show_strings=True)
    return engine.runs(operations)


def extract_text(doc: PDFDocument, page_num: int = 0,
                 code_map: Optional[Dict[int, str]] = None) -> str:
    """
    특정 페이지에서 텍스트 추출

    y가 같은 연속된 조각은 한 줄로 합침
    """
    lines: List[List[str]] = []
    current_y = None

    for run in extract_text_runs(doc, page_num, code_map):
        if current_y is None or abs(run.y - current_y) > LINE_TOLERANCE:
            lines.append([])
            current_y = run.y
        lines[-1].append(run.text)

    return '\n'.join(''.join(line) for line in lines)


def extract_all_text(doc: PDFDocument) -> str:
    """모든 페이지 텍스트 (페이지 사이 빈 줄)"""
    code_map = build_code_map(doc)
    texts = []
    for page_num in range(len(get_pages(doc))):
        texts.append(extract_text(doc, page_num, code_map))
    return '\n\n'.join(texts)
