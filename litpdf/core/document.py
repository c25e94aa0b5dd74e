"""
PDF 문서 모델과 그래프 탐색

- PDFRef / PDFId: 값 트리 안의 간접 참조와 문서 ID
- PDFObject: (객체 번호, 세대 번호)로 식별되는 간접 객체 + 스트림 데이터
- PDFDocument: id → 객체 맵, trailer, 탐색 쿼리

참조는 미리 풀지 않음 (resolve 호출 시 조회). 끊어진 참조는
모든 탐색 쿼리에서 None / 빈 결과로 처리하고 예외를 내지 않음.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

ObjectId = Tuple[int, int]


@dataclass(frozen=True)
class PDFRef:
    """객체 참조 (예: 1 0 R)"""
    obj_num: int
    gen_num: int

    @property
    def id(self) -> ObjectId:
        return (self.obj_num, self.gen_num)

    def __repr__(self):
        return f"Ref({self.obj_num} {self.gen_num} R)"


@dataclass(frozen=True)
class PDFId:
    """trailer /ID 배열의 128비트 식별자"""
    value: int

    def hex(self) -> str:
        return f"{self.value:032x}"

    def __repr__(self):
        return f"Id({self.hex()})"


@dataclass
class XRefEntry:
    """XRef 테이블 항목 (조회용 기록, 객체 위치 탐색에는 쓰지 않음)"""
    offset: int
    gen_num: int
    in_use: bool


@dataclass
class PDFObject:
    """간접 객체"""
    obj_num: int
    gen_num: int
    value: Any = None
    stream: bytes = b''

    @property
    def id(self) -> ObjectId:
        return (self.obj_num, self.gen_num)

    def dict_or_empty(self) -> Dict[str, Any]:
        """값이 딕셔너리면 그대로, 아니면 새 빈 딕셔너리"""
        if isinstance(self.value, dict):
            return self.value
        return {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.dict_or_empty().get(key, default)


@dataclass
class ReferenceInfo:
    """all_references() 결과 항목"""
    owner: ObjectId                   # 참조를 가진 객체
    path: Tuple[Union[str, int], ...]  # 딕셔너리 키 / 리스트 인덱스 경로
    ref: PDFRef
    target: Optional[PDFObject]       # 끊어진 참조면 None


@dataclass
class PDFDocument:
    """파싱된 PDF 문서"""
    version: str = ""
    objects: Dict[ObjectId, PDFObject] = field(default_factory=dict)
    trailer: Dict[str, Any] = field(default_factory=dict)
    xref: Dict[int, XRefEntry] = field(default_factory=dict)
    comments: List[Tuple[int, bytes]] = field(default_factory=list)

    # ------------------------------------------------------------------
    # 참조 해석
    # ------------------------------------------------------------------

    def resolve(self, ref: Union[PDFRef, ObjectId, None]) -> Optional[PDFObject]:
        """참조 또는 (번호, 세대) 튜플로 객체 조회"""
        if isinstance(ref, PDFRef):
            return self.objects.get(ref.id)
        if isinstance(ref, tuple) and len(ref) == 2:
            return self.objects.get(ref)
        return None

    def _resolve_dict(self, value: Any) -> Dict[str, Any]:
        """직접 딕셔너리 또는 딕셔너리 객체 참조"""
        if isinstance(value, dict):
            return value
        obj = self.resolve(value)
        return obj.dict_or_empty() if obj else {}

    def _resolve_list(self, value: Any) -> List[PDFObject]:
        """참조 리스트에서 해석 가능한 객체만"""
        if not isinstance(value, list):
            return []
        result = []
        for item in value:
            obj = self.resolve(item)
            if obj is not None:
                result.append(obj)
        return result

    # ------------------------------------------------------------------
    # 문서 구조
    # ------------------------------------------------------------------

    def catalog(self) -> Optional[PDFObject]:
        """trailer /Root"""
        return self.resolve(self.trailer.get('Root'))

    def info(self) -> Dict[str, Any]:
        """trailer /Info 딕셔너리"""
        return self._resolve_dict(self.trailer.get('Info'))

    def pages(self) -> Optional[PDFObject]:
        """Root → Pages 노드"""
        catalog = self.catalog()
        if catalog is None:
            return None
        return self.resolve(catalog.get('Pages'))

    def pages_kids(self) -> List[PDFObject]:
        """Pages /Kids 한 단계"""
        pages = self.pages()
        if pages is None:
            return []
        return self._resolve_list(pages.get('Kids'))

    def pages_grand_kids(self) -> List[PDFObject]:
        """Kids의 /Kids 한 단계 더 (임의 깊이 탐색 아님)"""
        result = []
        for kid in self.pages_kids():
            result.extend(self._resolve_list(kid.get('Kids')))
        return result

    def page_list(self) -> List[PDFObject]:
        """
        Page 객체 목록 (트리 순서)

        두 단계까지만 탐색: 중간 Pages 노드는 그 자식 Page들로 대체
        """
        result = []
        for kid in self.pages_kids():
            kid_type = kid.get('Type')
            if kid_type == 'Page':
                result.append(kid)
            elif kid_type == 'Pages':
                for grand_kid in self._resolve_list(kid.get('Kids')):
                    if grand_kid.get('Type') == 'Page':
                        result.append(grand_kid)
        return result

    def contents(self, page: PDFObject) -> Optional[bytes]:
        """페이지 /Contents 스트림 데이터 (여러 개면 줄바꿈으로 연결)"""
        value = page.get('Contents')
        if isinstance(value, PDFRef):
            obj = self.resolve(value)
            return obj.stream if obj else None

        streams = [obj.stream for obj in self._resolve_list(value)]
        if not streams:
            return None
        return b'\n'.join(streams)

    # ------------------------------------------------------------------
    # 폰트
    # ------------------------------------------------------------------

    def fonts(self) -> Dict[str, PDFObject]:
        """최상위 Pages 노드의 Resources /Font (트리 전체 병합 아님)"""
        pages = self.pages()
        if pages is None:
            return {}

        resources = self._resolve_dict(pages.get('Resources'))
        font_dict = self._resolve_dict(resources.get('Font'))

        result = {}
        for name, ref in font_dict.items():
            obj = self.resolve(ref)
            if obj is not None:
                result[name] = obj
        return result

    def descendant_fonts(self) -> List[PDFObject]:
        """복합 폰트(Type0)의 /DescendantFonts"""
        result = []
        for font in self.fonts().values():
            result.extend(self._resolve_list(font.get('DescendantFonts')))
        return result

    def font_descriptors(self) -> List[PDFObject]:
        """DescendantFonts의 /FontDescriptor"""
        result = []
        for font in self.descendant_fonts():
            obj = self.resolve(font.get('FontDescriptor'))
            if obj is not None:
                result.append(obj)
        return result

    def cmap_streams_of_type(self, type_name: str = 'CMap') -> List[PDFObject]:
        """/Type이 type_name이고 스트림이 있는 객체 (파일 순서)"""
        return [
            obj for obj in self.objects.values()
            if obj.get('Type') == type_name and obj.stream
        ]

    def to_unicode_streams(self) -> List[PDFObject]:
        """폰트들의 /ToUnicode 스트림"""
        result = []
        for font in self.fonts().values():
            obj = self.resolve(font.get('ToUnicode'))
            if obj is not None and obj.stream:
                result.append(obj)
        return result

    # ------------------------------------------------------------------
    # 전체 참조
    # ------------------------------------------------------------------

    def all_references(self) -> List[ReferenceInfo]:
        """
        모든 객체의 값 트리를 순회하며 참조 수집

        Returns:
            (소유 객체 id, 키 경로, 참조, 대상 객체) 목록, 문서 순서
        """
        result = []
        for obj_id, obj in self.objects.items():
            stack: List[Tuple[Tuple[Union[str, int], ...], Any]] = [((), obj.value)]
            while stack:
                path, value = stack.pop()
                if isinstance(value, PDFRef):
                    result.append(ReferenceInfo(obj_id, path, value, self.resolve(value)))
                elif isinstance(value, dict):
                    for key in reversed(list(value)):
                        stack.append((path + (key,), value[key]))
                elif isinstance(value, list):
                    for i in range(len(value) - 1, -1, -1):
                        stack.append((path + (i,), value[i]))
        return result
