from pathlib import Path

import fitz

from inspectcert.services.pdf.builder import CertificatePdfBuilder
from inspectcert.services.pdf.fields import TEMPLATE_FIELDS
from inspectcert.services.storage import StorageService, UploadResult


ALL_FIELD_NAMES = [field.template_name for field in TEMPLATE_FIELDS]


def build_template(path: Path, field_names) -> Path:
    """Writes a one page fillable PDF with a text field per name."""
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    for i, name in enumerate(field_names):
        widget = fitz.Widget()
        widget.field_name = name
        widget.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        widget.rect = fitz.Rect(72, 60 + i * 40, 520, 84 + i * 40)
        widget.field_value = ""
        widget.text_fontsize = 12
        page.add_widget(widget)
    doc.save(str(path))
    doc.close()
    return path


class CountingPdfBuilder(CertificatePdfBuilder):
    def __init__(self, config):
        super().__init__(config)
        self.calls = 0

    def build(self, record, output_path):
        self.calls += 1
        return super().build(record, output_path)


class RecordingStorage(StorageService):
    """Keeps uploaded bytes in memory; the local file is removed after upload."""

    def __init__(self):
        self.uploads = {}

    def upload(self, local_path, remote_key):
        self.uploads[remote_key] = Path(local_path).read_bytes()
        return UploadResult(
            storage_key=remote_key,
            public_url=f"https://cdn.example.com/{remote_key}"
        )


class FailingStorage(StorageService):
    def upload(self, local_path, remote_key):
        raise ConnectionError("storage unreachable")
