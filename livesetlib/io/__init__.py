"""Document I/O: container decoding, XML conversion and file facts."""

from .container import DecodeEvent, decode, decode_streaming, is_gzip_file
from .xmltree import element_to_tree, parse_document
from .fileinfo import (
    clear_digest_cache,
    digest_cache_size,
    get_file_info,
    get_file_info_async,
    sha256_file,
)

__all__ = [
    'DecodeEvent',
    'decode',
    'decode_streaming',
    'is_gzip_file',
    'element_to_tree',
    'parse_document',
    'clear_digest_cache',
    'digest_cache_size',
    'get_file_info',
    'get_file_info_async',
    'sha256_file',
]
