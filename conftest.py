import zlib

import pytest


def build_pdf(objects, trailer=b'<< /Size 1 /Root 1 0 R >>', header=b'%PDF-1.4\n'):
    """
    테스트용 PDF 바이트 생성

    Args:
        objects: (번호, 딕셔너리 바이트) 또는 (번호, 딕셔너리 바이트, 스트림 바이트)
                 스트림이 있으면 /Length 를 자동으로 추가
        trailer: trailer 딕셔너리 바이트
    """
    out = header
    offsets = []
    for entry in objects:
        num, body = entry[0], entry[1]
        offsets.append((num, len(out)))
        out += str(num).encode('ascii') + b' 0 obj\n'
        if len(entry) == 2:
            out += body + b'\nendobj\n'
        else:
            stream = entry[2]
            length = str(len(stream)).encode('ascii')
            out += body[:-2].rstrip() + b' /Length ' + length + b' >>'
            out += b'\nstream\n' + stream + b'\nendstream\nendobj\n'

    xref_offset = len(out)
    out += b'xref\n0 ' + str(len(objects) + 1).encode('ascii') + b'\n'
    out += b'0000000000 65535 f \n'
    for _, offset in sorted(offsets):
        out += b'%010d 00000 n \n' % offset
    out += b'trailer\n' + trailer + b'\nstartxref\n' + str(xref_offset).encode('ascii') + b'\n%%EOF\n'
    return out


SAMPLE_CMAP = b"""/CIDInit /ProcSet findresource begin
12 dict begin
begincmap
/CMapName /Adobe-Identity-UCS def
/CMapType 2 def
1 begincodespacerange
<0000> <FFFF>
endcodespacerange
3 beginbfchar
<0048> <0048>
<0069> <0069>
<0003> <0020>
endbfchar
endcmap
CMapName currentdict /CMap defineresource pop
end
end"""

SAMPLE_CONTENT = b"""BT
/F0 11 Tf
1 0 0 -1 70 78 Tm
[<00480069>] TJ
ET
BT
/F0 10 Tf
1 0 0 -1 70 100 Tm
[<0048> 500 <0069>] TJ
ET"""


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def sample_pdf():
    """카탈로그, 두 단계 페이지 트리, Type0 폰트, 압축된 ToUnicode CMap"""
    return build_pdf(
        [
            (1, b'<< /Type /Catalog /Pages 2 0 R >>'),
            (2, b'<< /Type /Pages /Kids [3 0 R 9 0 R] /Count 2 '
                b'/Resources << /Font << /F0 5 0 R >> >> >>'),
            (3, b'<< /Type /Page /Parent 2 0 R /Contents 4 0 R >>'),
            (4, b'<< >>', SAMPLE_CONTENT),
            (5, b'<< /Type /Font /Subtype /Type0 /BaseFont /Sample '
                b'/DescendantFonts [6 0 R] /ToUnicode 8 0 R >>'),
            (6, b'<< /Type /Font /Subtype /CIDFontType2 /FontDescriptor 7 0 R >>'),
            (7, b'<< /Type /FontDescriptor /FontName /Sample /Flags 4 /FontFile2 42 0 R >>'),
            (8, b'<< /Filter /FlateDecode >>', zlib.compress(SAMPLE_CMAP)),
            (9, b'<< /Type /Pages /Parent 2 0 R /Kids [10 0 R] /Count 1 >>'),
            (10, b'<< /Type /Page /Parent 9 0 R /Contents [11 0 R 12 0 R] >>'),
            (11, b'<< >>', b'BT /F0 12 Tf 1 0 0 1 10 20 Tm [<0048>] TJ ET'),
            (12, b'<< >>', b'BT /F0 12 Tf 1 0 0 1 10 40 Tm [<0069>] TJ ET'),
        ],
        trailer=b'<< /Size 13 /Root 1 0 R /Info 99 0 R\n'
                b'/ID [<0123456789ABCDEF0123456789ABCDEF> <00000000000000000000000000000001>] >>',
    )
