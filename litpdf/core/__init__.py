"""
PDF Parser Core Module
"""
from .errors import PDFError, PDFLexError, PDFSyntaxError, PDFSemanticError, PDFDecodeError
from .lexer import (
    PDFLexer, Token, TokenType,
    token_is_number, token_is_name, token_is_string
)
from .document import PDFDocument, PDFObject, PDFRef, PDFId, XRefEntry, ReferenceInfo
from .parser import PDFParser, ObjectParser
from .stream_decoder import StreamDecoder
from .content_stream import (
    ContentStreamLexer, Operation, OperationParser, parse_operations,
    TextLayoutEngine, TextState, TextRun, decode_string
)
from .cmap import parse_bfchar

__all__ = [
    # Errors
    'PDFError', 'PDFLexError', 'PDFSyntaxError', 'PDFSemanticError', 'PDFDecodeError',
    # Lexer
    'PDFLexer', 'Token', 'TokenType',
    'token_is_number', 'token_is_name', 'token_is_string',
    # Parser
    'PDFParser', 'ObjectParser', 'StreamDecoder',
    'PDFDocument', 'PDFObject', 'PDFRef', 'PDFId', 'XRefEntry', 'ReferenceInfo',
    # Content Stream
    'ContentStreamLexer', 'Operation', 'OperationParser', 'parse_operations',
    'TextLayoutEngine', 'TextState', 'TextRun', 'decode_string',
    # CMap
    'parse_bfchar',
]
