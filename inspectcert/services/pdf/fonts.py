from dataclasses import dataclass, field
from typing import List, Tuple

import fitz
from loguru import logger

from inspectcert.core.exceptions import TemplateError
from inspectcert.services.pdf.form import get_key, load_directory, set_key, xref_of


@dataclass
class EmbedReport:
    font_xref: int
    widgets: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)


class FontEmbedder:
    """
    Embeds a Hangul capable font into the template's interactive form.

    The font is registered once in the AcroForm default resources (/DR) and
    referenced from the form's and every widget's default appearance (/DA).
    Widgets that already carry a normal appearance stream also get the font
    in that stream's resources.

    Runs before any field value is written: value setting reads the font back
    from the widget's default appearance.
    """

    def __init__(self, font_buffer: bytes, font_name: str, font_size: float = 12):
        self.font_buffer = font_buffer
        self.font_name = font_name
        self.font_size = font_size

    @property
    def default_appearance(self) -> str:
        return f"/{self.font_name} {self.font_size:g} Tf 0 g"

    def embed(self, doc: fitz.Document) -> EmbedReport:
        if not doc.is_form_pdf:
            raise TemplateError("Certificate template has no interactive form.")

        directory = load_directory(doc)
        host = next((page for page in directory.pages if page.first_widget), directory.pages[0])

        font_xref = host.insert_font(fontname=self.font_name, fontbuffer=self.font_buffer)
        font_ref = f"{font_xref} 0 R"
        da = fitz.get_pdf_str(self.default_appearance)

        catalog = doc.pdf_catalog()
        set_key(doc, catalog, f"AcroForm/DR/Font/{self.font_name}", font_ref)
        set_key(doc, catalog, "AcroForm/DA", da)

        outcomes = []
        for name, widgets in directory.items():
            for widget in widgets:
                try:
                    self._embed_widget(doc, widget, font_ref, da)
                    outcomes.append((name, None))
                except Exception as e:
                    outcomes.append((name, str(e)))

        report = EmbedReport(
            font_xref=font_xref,
            widgets=len(outcomes),
            failures=[(name, error) for name, error in outcomes if error is not None]
        )
        for name, error in report.failures:
            logger.warning(f"Font not embedded for widget of field '{name}': {error}")
        logger.debug(
            f"Embedded font '{self.font_name}' (xref {font_xref}) into {report.widgets} widgets")
        return report

    def _embed_widget(self, doc: fitz.Document, widget: fitz.Widget, font_ref: str, da: str):
        doc.xref_set_key(widget.xref, "DA", da)

        # Kids of a multi-widget field inherit from the parent field
        kind, value = doc.xref_get_key(widget.xref, "Parent")
        if kind == "xref":
            doc.xref_set_key(xref_of(value), "DA", da)

        kind, value = get_key(doc, widget.xref, "AP/N")
        if kind == "xref":
            set_key(doc, xref_of(value), f"Resources/Font/{self.font_name}", font_ref)
