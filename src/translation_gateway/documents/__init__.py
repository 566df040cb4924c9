"""
Translation Documents

YAML codec for translation files.
"""

from .codec import (
    load_yaml,
    dump_yaml,
    parse_document,
    serialize_document,
    document_from_data,
)

__all__ = [
    'load_yaml',
    'dump_yaml',
    'parse_document',
    'serialize_document',
    'document_from_data',
]
