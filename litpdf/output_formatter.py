"""
PDF Output Formatter

파싱 결과를 출력용으로 변환:
- Text: 객체 / 참조 / 텍스트 조각 덤프 (PDF 문법과 비슷한 형태)
- JSON: 프로그래밍 처리용 구조화 데이터
"""

import base64
import json
from typing import Any, Dict, Iterable, List

from .core import Operation, PDFDocument, PDFId, PDFObject, PDFRef, ReferenceInfo, TextRun


# =============================================================================
# Text
# =============================================================================

def format_value(value: Any) -> str:
    """값을 PDF 문법과 비슷한 문자열로"""
    if isinstance(value, dict):
        items = ' '.join(f"/{k} {format_value(v)}" for k, v in value.items())
        return f"<< {items} >>" if items else "<< >>"
    if isinstance(value, list):
        return '[' + ' '.join(format_value(v) for v in value) + ']'
    if isinstance(value, PDFRef):
        return f"{value.obj_num} {value.gen_num} R"
    if isinstance(value, PDFId):
        return f"<{value.hex()}>"
    if isinstance(value, bytes):
        return repr(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    if isinstance(value, str):
        return f"/{value}"
    return str(value)


def format_object(obj: PDFObject) -> str:
    """간접 객체 하나"""
    lines = [f"{obj.obj_num} {obj.gen_num} obj", format_value(obj.value)]
    if obj.stream:
        lines.append(f"stream <{len(obj.stream)} bytes>")
    return '\n'.join(lines)


def format_path(path: Iterable[Any]) -> str:
    """키 경로: /Resources/Font[0]"""
    parts = []
    for part in path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f"/{part}")
    return ''.join(parts)


def format_references(references: List[ReferenceInfo]) -> str:
    """all_references() 결과"""
    lines = []
    for info in references:
        owner = f"{info.owner[0]} {info.owner[1]}"
        target = "(dangling)" if info.target is None else f"{info.ref.obj_num} {info.ref.gen_num} obj"
        lines.append(f"{owner} {format_path(info.path)} -> {target}")
    return '\n'.join(lines)


def format_runs(runs: List[TextRun]) -> str:
    """텍스트 조각 목록"""
    return '\n'.join(
        f"[{run.x:.1f}, {run.y:.1f}] {run.font_size:g}pt: {run.text!r}"
        for run in runs
    )


def format_operations(operations: List[Operation]) -> str:
    """연산 목록 (피연산자 + 연산자)"""
    lines = []
    for operation in operations:
        operands = ' '.join(str(token) for token in operation.operands)
        lines.append(f"{operands} {operation.op}" if operands else operation.op)
    return '\n'.join(lines)


def format_code_map(code_map: Dict[int, str]) -> str:
    """문자 코드 맵"""
    return '\n'.join(f"<{code:04X}> {char!r}" for code, char in sorted(code_map.items()))


# =============================================================================
# JSON
# =============================================================================

def to_python(value: Any) -> Any:
    """값을 JSON 인코딩 가능한 Python 객체로"""
    if isinstance(value, dict):
        return {k: to_python(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_python(v) for v in value]
    if isinstance(value, PDFRef):
        return {'ref': [value.obj_num, value.gen_num]}
    if isinstance(value, PDFId):
        return {'id': value.hex()}
    if isinstance(value, bytes):
        return {'base64': base64.b64encode(value).decode('ascii')}
    return value


def object_to_dict(obj: PDFObject, include_streams: bool = False) -> dict:
    """간접 객체 → dict"""
    data = {
        'id': [obj.obj_num, obj.gen_num],
        'value': to_python(obj.value),
        'stream_length': len(obj.stream),
    }
    if include_streams and obj.stream:
        data['stream'] = base64.b64encode(obj.stream).decode('ascii')
    return data


def document_to_dict(doc: PDFDocument, include_streams: bool = False) -> dict:
    """문서 전체 → dict"""
    return {
        'version': doc.version,
        'trailer': to_python(doc.trailer),
        'objects': [object_to_dict(obj, include_streams) for obj in doc.objects.values()],
    }


def runs_to_dict(runs: List[TextRun]) -> List[dict]:
    return [
        {'x': run.x, 'y': run.y, 'text': run.text, 'font_size': run.font_size}
        for run in runs
    ]


def to_json(data: Any, indent: int = 2) -> str:
    """dict / list → JSON 문자열"""
    return json.dumps(data, ensure_ascii=False, indent=indent)
