"""
ToUnicode CMap 파싱 (bfchar만)

CMap 형식 예시:
    2 beginbfchar
    <0048> <0048>
    <0065> <0065>
    endbfchar

'N beginbfchar' 줄 다음 N줄을 <코드> <유니코드> 쌍으로 읽음.
bfrange 블록은 읽지 않음.
"""

import logging
import re
from typing import Dict

from .errors import PDFDecodeError

logger = logging.getLogger(__name__)

BFCHAR_ENTRY = re.compile(r'^\s*<([0-9A-Fa-f]+)>\s*<([0-9A-Fa-f]+)>\s*$')


def parse_bfchar(cmap_data: bytes) -> Dict[int, str]:
    """
    CMap 스트림에서 bfchar 매핑 추출

    Returns:
        16비트 문자 코드 → 유니코드 문자
    """
    result = {}
    lines = cmap_data.decode('latin-1').splitlines()

    i = 0
    while i < len(lines):
        line = lines[i].rstrip()
        i += 1
        if not line.endswith(' beginbfchar'):
            continue

        count_field = line.split()[0]
        if not count_field.isdigit():
            raise PDFDecodeError(f"Invalid bfchar entry count {count_field!r}")
        count = int(count_field)

        if i + count > len(lines):
            raise PDFDecodeError(f"bfchar block declares {count} entries, found {len(lines) - i}")

        for entry in lines[i:i + count]:
            match = BFCHAR_ENTRY.match(entry)
            if not match:
                raise PDFDecodeError(f"Malformed bfchar entry {entry!r}")
            src, dst = match.groups()
            result[int(src, 16)] = _unicode_from_hex(dst)
        i += count

    logger.debug("Parsed %d bfchar entries", len(result))
    return result


def _unicode_from_hex(dst: str) -> str:
    """<YYYY> → 문자 (4자리 초과는 UTF-16BE, 서로게이트 쌍 포함)"""
    if len(dst) <= 4:
        code = int(dst, 16)
        if 0xD800 <= code <= 0xDFFF:
            raise PDFDecodeError(f"bfchar destination <{dst}> is a lone surrogate")
        return chr(code)
    try:
        return bytes.fromhex(dst).decode('utf-16-be')
    except ValueError as e:
        raise PDFDecodeError(f"Invalid bfchar destination <{dst}>") from e
