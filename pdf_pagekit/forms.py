"""AcroForm field listing and filling."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pypdf.generic import NameObject

from .backends.base import DocumentCodec
from .document import Document
from .exceptions import NoFillableFields
from .types import FieldValues, FormField, OutputFile
from .utils import get_logger

LOGGER = get_logger("pdf_pagekit.forms")

FILLED_NAME = "filled.pdf"


def _terminal_fields(document: Document) -> Dict[str, Mapping[str, Any]]:
    fields = document.writer.get_fields() or {}
    return {name: field for name, field in fields.items() if field.get("/FT") is not None}


def list_form_fields(codec: DocumentCodec, data: bytes) -> List[FormField]:
    document = codec.open(data)
    fields = _terminal_fields(document)
    if not fields:
        raise NoFillableFields()

    return [
        FormField(
            name=name,
            value="" if field.get("/V") is None else str(field.get("/V")),
            field_type=str(field.get("/FT")),
        )
        for name, field in fields.items()
    ]


def fill_form(codec: DocumentCodec, data: bytes, values: FieldValues) -> OutputFile:
    """Fill the named fields and flatten every widget into page content."""

    document = codec.open(data)
    fields = _terminal_fields(document)
    if not fields:
        raise NoFillableFields()

    unknown = sorted(set(values) - set(fields))
    if unknown:
        LOGGER.warning("Ignoring unknown form fields: %s", ", ".join(unknown))

    # Untouched text fields keep their current value once flattened.
    merged: Dict[str, str] = {
        name: "" if field.get("/V") is None else str(field.get("/V"))
        for name, field in fields.items()
        if field.get("/FT") == "/Tx"
    }
    merged.update({name: value for name, value in values.items() if name in fields})

    writer = document.writer
    for page in writer.pages:
        if "/Annots" not in page:
            continue
        writer.update_page_form_field_values(page, merged, auto_regenerate=False, flatten=True)

    writer.remove_annotations(subtypes="/Widget")
    root = writer.root_object
    if "/AcroForm" in root:
        del root[NameObject("/AcroForm")]

    return OutputFile(FILLED_NAME, codec.save(document))


__all__ = ["list_form_fields", "fill_form", "FILLED_NAME"]
