from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import fitz
from loguru import logger

from inspectcert.services.pdf.fields import TEMPLATE_FIELDS, TemplateField, render_fields
from inspectcert.services.pdf.form import load_directory
from inspectcert.services.pdf.formatting import DATE_FORMAT
from inspectcert.services.pdf.script import contains_target_script


@dataclass
class FillReport:
    """Outcome of filling one document, field by field."""
    filled: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    blanked: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def warnings(self) -> List[str]:
        messages = [f"Template field '{name}' not found" for name in self.missing]
        messages += [f"Template field '{name}' left blank: {self.errors[name]}"
                     for name in self.blanked]
        messages += [f"Template field '{name}' could not be written: {self.errors[name]}"
                     for name in self.failed]
        return messages

    def log(self):
        for name in self.missing:
            logger.warning(f"Template field missing, skipped: {name}")
        for name in self.blanked:
            logger.error(f"setValue {name} failed, wrote empty value: {self.errors[name]}")
        for name in self.failed:
            logger.error(f"setValue {name} failed, empty fallback failed too: {self.errors[name]}")
        logger.info(
            f"Filled {len(self.filled)} fields "
            f"({len(self.missing)} missing, {len(self.blanked)} blanked, {len(self.failed)} failed)")


class FormFiller:
    """
    Writes the certificate record into the template form.

    A field missing from the template, or one that cannot be written, never
    stops the remaining fields from being filled.
    """

    def __init__(self, fields: Tuple[TemplateField, ...] = TEMPLATE_FIELDS,
                 date_format: str = DATE_FORMAT):
        self.fields = fields
        self.date_format = date_format

    def fill(self, doc: fitz.Document, record: Any) -> FillReport:
        directory = load_directory(doc)
        logger.info(f"Template form fields: {', '.join(directory.names())}")

        report = FillReport()
        for name, value in render_fields(record, self.fields, self.date_format):
            widgets = directory.get(name)
            if not widgets:
                report.missing.append(name)
                continue

            try:
                self._write(doc, widgets, value)
                report.filled.append(name)
            except Exception as e:
                report.errors[name] = str(e)
                try:
                    self._write(doc, widgets, "")
                    report.blanked.append(name)
                except Exception as fallback_error:
                    report.errors[name] = f"{e}; {fallback_error}"
                    report.failed.append(name)

        report.log()
        return report

    def _write(self, doc: fitz.Document, widgets: List[fitz.Widget], value: str):
        if contains_target_script(value):
            setter = self._set_unicode
        else:
            setter = self._set_direct
        for widget in widgets:
            setter(doc, widget, value)

    def _set_direct(self, doc: fitz.Document, widget: fitz.Widget, value: str):
        widget.field_value = value
        widget.update()

    def _set_unicode(self, doc: fitz.Document, widget: fitz.Widget, value: str):
        """
        Stores the value as a UTF-16 text string without letting the library
        synthesize an appearance, which only covers Latin encodings. The
        appearance is regenerated with the embedded font before flattening.
        """
        if widget.field_type != fitz.PDF_WIDGET_TYPE_TEXT:
            self._set_direct(doc, widget, value)
            return
        doc.xref_set_key(widget.xref, "V", fitz.get_pdf_str(value))
