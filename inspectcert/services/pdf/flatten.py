"""
Appearance regeneration, flattening and serialization of a filled form.

Flattening is one way: widgets are replaced by static page content and the
AcroForm is dropped, so the saved file has no editable fields left.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import fitz
from loguru import logger

from inspectcert.services.pdf.form import get_key, set_key


TEXT_WIDGET_TYPES = (
    fitz.PDF_WIDGET_TYPE_TEXT,
    fitz.PDF_WIDGET_TYPE_COMBOBOX,
    fitz.PDF_WIDGET_TYPE_LISTBOX,
)

PADDING = 2
MIN_FONT_SIZE = 6


@dataclass
class TextRun:
    point: fitz.Point
    text: str
    fontsize: float


@dataclass
class PageAppearance:
    page: fitz.Page
    runs: List[TextRun] = field(default_factory=list)


def _quadding(doc: fitz.Document, widget: fitz.Widget) -> int:
    kind, value = get_key(doc, widget.xref, "Q")
    return int(value) if kind == "int" else 0


def layout_value(doc: fitz.Document, widget: fitz.Widget, text: str,
                 font: fitz.Font, font_size: float) -> TextRun:
    """Places `text` on one line inside the widget rectangle, shrinking it to fit."""
    rect = widget.rect
    available = rect.width - 2 * PADDING

    size = font_size
    width = font.text_length(text, fontsize=size)
    while width > available and size > MIN_FONT_SIZE:
        size = max(MIN_FONT_SIZE, size - 0.5)
        width = font.text_length(text, fontsize=size)

    quadding = _quadding(doc, widget)
    if quadding == 1:
        x = rect.x0 + (rect.width - width) / 2
    elif quadding == 2:
        x = rect.x1 - PADDING - width
    else:
        x = rect.x0 + PADDING

    line_height = size * (font.ascender - font.descender)
    y = rect.y0 + (rect.height - line_height) / 2 + size * font.ascender
    return TextRun(point=fitz.Point(x, y), text=text, fontsize=size)


def regenerate_appearances(doc: fitz.Document, font: fitz.Font,
                           font_size: float = 12) -> List[PageAppearance]:
    """
    Lays out the current value of every text widget with the embedded font.

    Values are read back from the document, so whatever the filler managed
    to store is what ends up on the page.
    """
    appearances = []
    for page in doc:
        appearance = PageAppearance(page=page)
        for widget in page.widgets():
            if widget.field_type not in TEXT_WIDGET_TYPES:
                logger.debug(f"No text appearance for non-text field '{widget.field_name}'")
                continue
            value = widget.field_value
            if not value or not isinstance(value, str):
                continue
            appearance.runs.append(layout_value(doc, widget, value, font, font_size))
        appearances.append(appearance)
    return appearances


def flatten(doc: fitz.Document, appearances: List[PageAppearance], font: fitz.Font) -> None:
    for appearance in appearances:
        page = appearance.page
        if appearance.runs:
            writer = fitz.TextWriter(page.rect)
            for run in appearance.runs:
                writer.append(run.point, run.text, font=font, fontsize=run.fontsize)
            writer.write_text(page, color=(0, 0, 0))

        widget = page.first_widget
        while widget:
            widget = page.delete_widget(widget)

    doc.xref_set_key(doc.pdf_catalog(), "AcroForm", "null")


def mark_need_appearances(doc: fitz.Document) -> None:
    """Keeps the form interactive and asks viewers to rebuild appearances."""
    set_key(doc, doc.pdf_catalog(), "AcroForm/NeedAppearances", "true")


def save(doc: fitz.Document, path: Path) -> None:
    doc.save(str(path), garbage=3, deflate=True)
