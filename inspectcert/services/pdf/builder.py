from dataclasses import dataclass
from pathlib import Path
from typing import Any

import fitz
from loguru import logger

from inspectcert.core.exceptions import TemplateError
from inspectcert.services.pdf.filler import FillReport, FormFiller
from inspectcert.services.pdf.flatten import (
    flatten, mark_need_appearances, regenerate_appearances, save
)
from inspectcert.services.pdf.fonts import FontEmbedder
from inspectcert.services.pdf.formatting import DATE_FORMAT
from inspectcert.utils.pdf_text import parse_full_text


@dataclass(frozen=True)
class PdfEngineConfig:
    template_path: Path
    font_path: Path
    font_name: str = "Pretendard"
    font_size: float = 12
    date_format: str = DATE_FORMAT
    flatten: bool = True

    @classmethod
    def from_settings(cls, settings) -> "PdfEngineConfig":
        return cls(
            template_path=Path(settings.template_path),
            font_path=Path(settings.font_path),
            font_name=settings.pdf_font_name,
            font_size=settings.pdf_font_size,
            date_format=settings.pdf_date_format,
            flatten=settings.pdf_flatten,
        )


@dataclass
class BuildResult:
    path: Path
    report: FillReport
    text: str = ""


class CertificatePdfBuilder:
    """
    Generates one certificate PDF from the fillable template.

    Template and font are read once, when the builder is created. Each build
    opens a private copy of the template and runs the stages in order:
    font embedding, filling, appearance regeneration + flattening, save.
    """

    def __init__(self, config: PdfEngineConfig):
        self.config = config
        try:
            self._template = config.template_path.read_bytes()
            font_buffer = config.font_path.read_bytes()
        except OSError as e:
            raise TemplateError(f"Cannot load certificate resources: {e}") from e

        self.font = fitz.Font(fontbuffer=font_buffer)
        self.embedder = FontEmbedder(font_buffer, config.font_name, config.font_size)
        self.filler = FormFiller(date_format=config.date_format)

    def build(self, record: Any, output_path: Path) -> BuildResult:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with self._open_template() as doc:
            self.embedder.embed(doc)
            report = self.filler.fill(doc, record)
            if self.config.flatten:
                appearances = regenerate_appearances(doc, self.font, self.config.font_size)
                flatten(doc, appearances, self.font)
            else:
                mark_need_appearances(doc)
            save(doc, output_path)

        logger.info(f"PDF saved: {output_path}")

        # Read the saved file back; an unreadable certificate fails the build
        text = parse_full_text(output_path.read_bytes())
        return BuildResult(path=output_path, report=report, text=text)

    def _open_template(self) -> fitz.Document:
        try:
            return fitz.open(stream=self._template, filetype="pdf")
        except Exception as e:
            raise TemplateError(f"Certificate template cannot be opened: {e}") from e
