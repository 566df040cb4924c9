"""
Translation Document Codec

Parses translation files (YAML documents with a ``labels`` list) into
TranslationDocument objects and serializes them back.

Files are read with ruamel.yaml's round-trip loader under YAML 1.2 rules
and the loaded tree stays attached to the document. Serializing writes
changed terms into that tree and dumps it, so comments, key order, quoting
and the spelling of untouched scalars (``12:30``, ``010``, ``1_000``,
``0x1F``) come out as they went in. Changed terms and documents built in
memory are written with double-quoted values, plain keys and no line
wrapping.
"""

import io
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from ..errors import DocumentFormatError
from ..models.translation import TranslationDocument, Label, LanguageEntry


logger = logging.getLogger(__name__)


def _round_trip_yaml() -> YAML:
    # YAML instances are not thread-safe; one per call
    yaml = YAML(typ='rt')
    yaml.preserve_quotes = True
    yaml.width = sys.maxsize
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _quoted(data: Any) -> Any:
    """Copy of plain data with every string value double-quoted."""
    if isinstance(data, dict):
        return {key: _quoted(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_quoted(item) for item in data]
    if isinstance(data, str):
        return DoubleQuotedScalarString(data)
    return data


def _dump(data: Any) -> str:
    stream = io.StringIO()
    _round_trip_yaml().dump(data, stream)
    return stream.getvalue()


def load_yaml(text: str) -> Any:
    """
    Parse YAML text into plain Python data (YAML 1.2 rules).

    Raises:
        DocumentFormatError: If the text is not valid YAML
    """
    try:
        return YAML(typ='safe', pure=True).load(text)
    except YAMLError as e:
        raise DocumentFormatError(f"Invalid YAML: {e}") from e


def dump_yaml(data: Any) -> str:
    """Serialize plain data in the translation file style."""
    return _dump(_quoted(data))


def _parse_translations(label_name: str, translations: Any) -> List[LanguageEntry]:
    if translations is None:
        return []
    if not isinstance(translations, list):
        raise DocumentFormatError(f"Label '{label_name}' has translations that are not a list")

    entries = []
    for group, item in enumerate(translations):
        if not isinstance(item, dict):
            raise DocumentFormatError(
                f"Label '{label_name}' has a translation entry that is not a mapping: {item!r}"
            )
        for language, term in item.items():
            entries.append(LanguageEntry(language_code=str(language), term=term, group=group))
    return entries


def _parse_label(index: int, data: Any) -> Label:
    if not isinstance(data, dict):
        raise DocumentFormatError(f"Label #{index + 1} is not a mapping")

    name = data.get('name')
    if name is None or not str(name).strip():
        raise DocumentFormatError(f"Label #{index + 1} has no name")
    name = str(name)

    if 'translations' not in data:
        raise DocumentFormatError(f"Label '{name}' has no translations list")

    extra = {key: value for key, value in data.items() if key not in ('name', 'translations')}
    return Label(
        name=name,
        translations=_parse_translations(name, data['translations']),
        extra=extra,
        key_order=list(data.keys()),
    )


def document_from_data(data: Any) -> TranslationDocument:
    """
    Build a TranslationDocument from already-parsed YAML data.

    Raises:
        DocumentFormatError: If the data has no ``labels`` list or a label is malformed
    """
    if not isinstance(data, dict):
        raise DocumentFormatError("Translation file must be a mapping with a 'labels' list")

    labels = data.get('labels')
    if not isinstance(labels, list):
        raise DocumentFormatError("Translation file has no 'labels' list")

    extra = {key: value for key, value in data.items() if key != 'labels'}
    return TranslationDocument(
        labels=[_parse_label(index, label) for index, label in enumerate(labels)],
        extra=extra,
        key_order=list(data.keys()),
    )


def parse_document(text: str) -> TranslationDocument:
    """
    Parse translation file text.

    Raises:
        DocumentFormatError: If the text is not valid YAML or not a translation document
    """
    try:
        data = _round_trip_yaml().load(text)
    except YAMLError as e:
        raise DocumentFormatError(f"Invalid YAML: {e}") from e

    document = document_from_data(data)
    document.source = data
    logger.debug(f"Parsed translation document with {len(document.labels)} labels")
    return document


def _find_key(mapping: Dict, language_code: str) -> Optional[Any]:
    for key in mapping:
        if str(key) == language_code:
            return key
    return None


def _term_slots(document: TranslationDocument) -> Optional[List[Tuple[Dict, Any, LanguageEntry]]]:
    """
    Locate every entry's scalar in the loaded tree.

    Returns:
        (translation map, key, entry) per entry, or None when the labels no
        longer line up with the tree
    """
    source = document.source
    if not isinstance(source, dict):
        return None

    nodes = source.get('labels')
    if not isinstance(nodes, list) or len(nodes) != len(document.labels):
        return None

    slots = []
    for label, node in zip(document.labels, nodes):
        items = node.get('translations') if isinstance(node, dict) else None
        for entry in label.translations:
            if not isinstance(items, list) or entry.group is None or entry.group >= len(items):
                return None
            item = items[entry.group]
            key = _find_key(item, entry.language_code) if isinstance(item, dict) else None
            if key is None:
                return None
            slots.append((item, key, entry))
    return slots


def serialize_document(document: TranslationDocument) -> str:
    """
    Serialize a TranslationDocument back to YAML text.

    Parsed documents are written through their loaded tree: only terms that
    differ from the tree are replaced, double-quoted. Documents without a
    tree, or whose labels no longer match it, are written from scratch.
    """
    slots = _term_slots(document) if document.source is not None else None
    if slots is None:
        if document.source is not None:
            logger.warning("Translation document no longer matches its source; rewriting the whole file")
        return dump_yaml(document.to_dict())

    for item, key, entry in slots:
        if item[key] == entry.term:
            continue
        item[key] = DoubleQuotedScalarString(entry.term) if isinstance(entry.term, str) else entry.term

    return _dump(document.source)
