import pytest

from litpdf.core import PDFDocument, PDFObject, PDFParser, PDFRef


@pytest.fixture
def doc(sample_pdf):
    return PDFParser(sample_pdf).parse()


def ids(objects):
    return [obj.id for obj in objects]


def test_resolve(doc):
    assert doc.resolve(PDFRef(1, 0)).value['Type'] == 'Catalog'
    assert doc.resolve((3, 0)).id == (3, 0)
    assert doc.resolve((99, 0)) is None
    assert doc.resolve(PDFRef(3, 1)) is None
    assert doc.resolve(None) is None
    assert doc.resolve('Catalog') is None


def test_page_tree(doc):
    assert doc.catalog().id == (1, 0)
    assert doc.pages().id == (2, 0)
    assert ids(doc.pages_kids()) == [(3, 0), (9, 0)]
    assert ids(doc.pages_grand_kids()) == [(10, 0)]
    assert ids(doc.page_list()) == [(3, 0), (10, 0)]


def test_contents(doc):
    first, second = doc.page_list()
    assert doc.contents(first).startswith(b'BT\n/F0 11 Tf')
    assert doc.contents(second) == (b'BT /F0 12 Tf 1 0 0 1 10 20 Tm [<0048>] TJ ET\n'
                                    b'BT /F0 12 Tf 1 0 0 1 10 40 Tm [<0069>] TJ ET')


def test_fonts(doc):
    fonts = doc.fonts()
    assert list(fonts) == ['F0']
    assert fonts['F0'].id == (5, 0)
    assert ids(doc.descendant_fonts()) == [(6, 0)]
    assert ids(doc.font_descriptors()) == [(7, 0)]
    assert ids(doc.to_unicode_streams()) == [(8, 0)]
    assert doc.cmap_streams_of_type('CMap') == []
    assert ids(doc.cmap_streams_of_type('FontDescriptor')) == []


def test_cmap_streams_of_type(make_pdf):
    doc = PDFParser(make_pdf([
        (1, b'<< /Type /CMap >>', b'1 beginbfchar\n<0001> <0041>\nendbfchar'),
        (2, b'<< /Type /CMap >>'),
        (3, b'<< /Type /XObject >>', b'data'),
    ])).parse()
    assert ids(doc.cmap_streams_of_type('CMap')) == [(1, 0)]
    assert ids(doc.cmap_streams_of_type('XObject')) == [(3, 0)]


def test_dangling_info(doc):
    assert doc.trailer['Info'] == PDFRef(99, 0)
    assert doc.info() == {}


def test_all_references(doc):
    references = doc.all_references()
    assert len(references) == 15
    first = references[0]
    assert (first.owner, first.path, first.ref) == ((1, 0), ('Pages',), PDFRef(2, 0))
    assert first.target.id == (2, 0)

    paths = [(r.owner, r.path) for r in references if r.owner == (2, 0)]
    assert paths == [
        ((2, 0), ('Kids', 0)),
        ((2, 0), ('Kids', 1)),
        ((2, 0), ('Resources', 'Font', 'F0')),
    ]


def test_all_references_dangling_target(doc):
    dangling = [r for r in doc.all_references() if r.target is None]
    assert len(dangling) == 1
    assert dangling[0].owner == (7, 0)
    assert dangling[0].path == ('FontFile2',)
    assert dangling[0].ref == PDFRef(42, 0)


def test_all_references_nested_path(make_pdf):
    doc = PDFParser(make_pdf([
        (1, b'<< /a << /b [5 1 0 R] >> >>'),
        (2, b'<< /x 1 >>'),
    ])).parse()
    references = doc.all_references()
    assert len(references) == 1
    info = references[0]
    assert info.owner == (1, 0)
    assert info.path == ('a', 'b', 1)
    assert info.ref == PDFRef(1, 0)
    assert info.target.id == (1, 0)


def test_dict_or_empty_is_not_shared():
    obj = PDFObject(1, 0, [1, 2])
    empty = obj.dict_or_empty()
    empty['x'] = 1
    assert obj.dict_or_empty() == {}
    assert obj.get('x') is None


def test_empty_document_queries():
    doc = PDFDocument()
    assert doc.catalog() is None
    assert doc.info() == {}
    assert doc.pages() is None
    assert doc.pages_kids() == []
    assert doc.pages_grand_kids() == []
    assert doc.page_list() == []
    assert doc.fonts() == {}
    assert doc.descendant_fonts() == []
    assert doc.font_descriptors() == []
    assert doc.to_unicode_streams() == []
    assert doc.cmap_streams_of_type('CMap') == []
    assert doc.all_references() == []


def test_dangling_references_everywhere(make_pdf):
    doc = PDFParser(make_pdf(
        [
            (1, b'<< /Type /Catalog /Pages 2 0 R >>'),
            (2, b'<< /Type /Pages /Kids [3 0 R 40 0 R] '
                b'/Resources << /Font << /F0 4 0 R /F1 50 0 R >> >> >>'),
            (3, b'<< /Type /Page /Contents 60 0 R >>'),
            (4, b'<< /Type /Font /DescendantFonts [70 0 R] /ToUnicode 80 0 R >>'),
        ],
        trailer=b'<< /Root 1 0 R /Info 90 0 R >>',
    )).parse()

    assert ids(doc.pages_kids()) == [(3, 0)]
    assert ids(doc.page_list()) == [(3, 0)]
    assert doc.pages_grand_kids() == []
    assert doc.contents(doc.page_list()[0]) is None
    assert list(doc.fonts()) == ['F0']
    assert doc.descendant_fonts() == []
    assert doc.font_descriptors() == []
    assert doc.to_unicode_streams() == []
    assert doc.info() == {}


def test_missing_root():
    doc = PDFParser(b"1 0 obj\n<< /Type /Catalog >>\nendobj\nxref\ntrailer\n<< >>\n").parse()
    assert doc.catalog() is None
    assert doc.pages() is None
    assert doc.page_list() == []


def test_contents_of_page_without_contents(make_pdf):
    doc = PDFParser(make_pdf([(1, b'<< /Type /Page >>')])).parse()
    assert doc.contents(doc.objects[(1, 0)]) is None
