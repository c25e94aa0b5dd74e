"""
PDF 스트림 디코딩

지원하는 필터:
1. FlateDecode (zlib)

그 외 필터가 지정된 스트림은 원본 바이트를 그대로 보관
"""

import logging
import zlib
from typing import Any, List, Union

from .errors import PDFDecodeError

logger = logging.getLogger(__name__)


class StreamDecoder:
    """PDF 스트림 디코더"""

    FLATE = 'FlateDecode'

    @staticmethod
    def is_flate(filters: Union[None, str, List[Any]]) -> bool:
        """Filter 항목이 FlateDecode 하나인지 확인"""
        if isinstance(filters, list):
            return len(filters) == 1 and filters[0] == StreamDecoder.FLATE
        return filters == StreamDecoder.FLATE

    @staticmethod
    def decode(data: bytes, filters: Union[None, str, List[Any]]) -> bytes:
        """
        Filter 항목에 따라 스트림 디코딩

        Args:
            data: 원본 스트림 데이터
            filters: 딕셔너리의 Filter 값 (없으면 None)

        Returns:
            FlateDecode면 압축 해제된 데이터, 아니면 원본 그대로
        """
        if StreamDecoder.is_flate(filters):
            return StreamDecoder.decode_flate(data)
        if filters is not None:
            logger.debug("Keeping stream with filter %r undecoded", filters)
        return data

    @staticmethod
    def decode_flate(data: bytes) -> bytes:
        """FlateDecode (zlib) 압축 해제"""
        try:
            return zlib.decompress(data)
        except zlib.error:
            pass

        # 일부 PDF는 헤더 없이 raw deflate 사용
        try:
            return zlib.decompress(data, -15)
        except zlib.error as e:
            raise PDFDecodeError(f"FlateDecode failed: {e}") from e
