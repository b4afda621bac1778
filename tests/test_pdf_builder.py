from datetime import date
from types import SimpleNamespace

import fitz
import pytest

from inspectcert.core.exceptions import PdfTextExtractionError, TemplateError
from inspectcert.services.pdf.builder import CertificatePdfBuilder
from inspectcert.services.pdf.filler import FormFiller
from inspectcert.services.pdf.fonts import FontEmbedder
from inspectcert.services.pdf.form import get_key
from inspectcert.services.pdf.fields import TEMPLATE_FIELDS
from inspectcert.utils.pdf_text import parse_full_text

from tests.helpers import ALL_FIELD_NAMES, build_template


def _record(**overrides):
    values = {field.attribute: None for field in TEMPLATE_FIELDS}
    values.update(
        cert_number="CERT-20261017-ABC123",
        issue_date=date(2026, 10, 17),
        expire_date=date(2027, 10, 17),
        manufacturer="ISO Motors",
        model_name="Model X",
        vin="KMHXX00XXXX000001",
        manufacture_year=2021,
        mileage=15000,
        inspector_code="INS-07",
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def _widgets(path):
    with fitz.open(str(path)) as doc:
        return [w.field_name for page in doc for w in page.widgets()]


def test_build_produces_flattened_pdf(builder, tmp_path):
    result = builder.build(_record(), tmp_path / "cert.pdf")

    assert result.path.exists()
    assert _widgets(result.path) == []
    with fitz.open(str(result.path)) as doc:
        assert not doc.is_form_pdf

    text = parse_full_text(result.path.read_bytes())
    assert "KMHXX00XXXX000001" in text
    assert "15000 km" in text
    assert "ISO Motors" in text
    assert "CERT-20261017-ABC123" in text


def test_build_reports_every_field_filled(builder, tmp_path):
    result = builder.build(_record(issued_by="이소모터스"), tmp_path / "cert.pdf")

    assert sorted(result.report.filled) == sorted(ALL_FIELD_NAMES)
    assert result.report.warnings == []


def test_korean_values_are_rendered(builder, tmp_path):
    result = builder.build(
        _record(issued_by="이소모터스", inspector_name="김검사"), tmp_path / "cert.pdf")

    text = parse_full_text(result.path.read_bytes())
    assert "이소모터스" in text
    assert "김검사" in text
    assert "2026년 10월 17일" in text


def test_template_missing_a_field_still_builds(make_config, tmp_path):
    names = [name for name in ALL_FIELD_NAMES if name != "modelName"]
    template = build_template(tmp_path / "partial.pdf", names)
    builder = CertificatePdfBuilder(make_config(template))

    result = builder.build(_record(), tmp_path / "cert.pdf")

    assert result.report.missing == ["modelName"]
    assert result.report.warnings == ["Template field 'modelName' not found"]
    assert "modelName" not in result.report.filled
    text = parse_full_text(result.path.read_bytes())
    assert "Model X" not in text
    assert "15000 km" in text
    assert "KMHXX00XXXX000001" in text


def test_failing_field_falls_back_to_blank(builder, tmp_path, monkeypatch):
    original = FormFiller._set_direct

    def flaky(self, doc, widget, value):
        if widget.field_name == "vin" and value:
            raise ValueError("cannot encode value")
        return original(self, doc, widget, value)

    monkeypatch.setattr(FormFiller, "_set_direct", flaky)
    result = builder.build(_record(), tmp_path / "cert.pdf")

    assert result.report.blanked == ["vin"]
    assert "vin" not in result.report.filled
    assert "cannot encode value" in result.report.warnings[0]
    text = parse_full_text(result.path.read_bytes())
    assert "KMHXX00XXXX000001" not in text
    assert "15000 km" in text


def test_field_failing_twice_does_not_abort(builder, tmp_path, monkeypatch):
    original = FormFiller._set_direct

    def broken(self, doc, widget, value):
        if widget.field_name == "mileage":
            raise ValueError("broken widget")
        return original(self, doc, widget, value)

    monkeypatch.setattr(FormFiller, "_set_direct", broken)
    result = builder.build(_record(), tmp_path / "cert.pdf")

    assert result.report.failed == ["mileage"]
    assert len(result.report.filled) == len(ALL_FIELD_NAMES) - 1
    assert result.path.exists()


def test_widget_embedding_failure_is_not_fatal(builder, tmp_path, monkeypatch):
    original = FontEmbedder._embed_widget
    reports = []

    def flaky(self, doc, widget, font_ref, da):
        if widget.field_name == "inspectorCode":
            raise RuntimeError("damaged appearance stream")
        return original(self, doc, widget, font_ref, da)

    original_embed = FontEmbedder.embed

    def recording_embed(self, doc):
        report = original_embed(self, doc)
        reports.append(report)
        return report

    monkeypatch.setattr(FontEmbedder, "_embed_widget", flaky)
    monkeypatch.setattr(FontEmbedder, "embed", recording_embed)
    result = builder.build(_record(), tmp_path / "cert.pdf")

    assert reports[0].failures == [("inspectorCode", "damaged appearance stream")]
    assert reports[0].widgets == len(ALL_FIELD_NAMES)
    assert "KMHXX00XXXX000001" in parse_full_text(result.path.read_bytes())


def test_embedder_registers_font_in_form_and_widgets(template_path, font_path):
    embedder = FontEmbedder(font_path.read_bytes(), "Pretendard")

    with fitz.open(str(template_path)) as doc:
        report = embedder.embed(doc)
        catalog = doc.pdf_catalog()

        assert get_key(doc, catalog, "AcroForm/DR/Font/Pretendard") == (
            "xref", f"{report.font_xref} 0 R")
        assert get_key(doc, catalog, "AcroForm/DA")[1] == "/Pretendard 12 Tf 0 g"
        for page in doc:
            for widget in page.widgets():
                assert doc.xref_get_key(widget.xref, "DA")[1] == "/Pretendard 12 Tf 0 g"


def test_template_without_form_is_rejected(make_config, tmp_path):
    plain = tmp_path / "plain.pdf"
    doc = fitz.open()
    doc.new_page()
    doc.save(str(plain))
    doc.close()

    builder = CertificatePdfBuilder(make_config(plain))
    with pytest.raises(TemplateError):
        builder.build(_record(), tmp_path / "cert.pdf")


def test_missing_resources_raise_template_error(make_config, tmp_path):
    with pytest.raises(TemplateError):
        CertificatePdfBuilder(make_config(tmp_path / "nope.pdf"))


def test_unflattened_output_keeps_form(make_config, template_path, tmp_path):
    builder = CertificatePdfBuilder(make_config(template_path, flatten=False))
    result = builder.build(_record(), tmp_path / "cert.pdf")

    with fitz.open(str(result.path)) as doc:
        values = {w.field_name: w.field_value for page in doc for w in page.widgets()}
        assert get_key(doc, doc.pdf_catalog(), "AcroForm/NeedAppearances") == ("bool", "true")
    assert values["mileage"] == "15000 km"
    assert values["issueDate_es_:date"] == "2026년 10월 17일"


def test_build_is_repeatable(builder, tmp_path):
    first = builder.build(_record(), tmp_path / "a.pdf")
    second = builder.build(_record(), tmp_path / "b.pdf")

    assert parse_full_text(first.path.read_bytes()) == parse_full_text(second.path.read_bytes())
    assert builder.calls == 2


def test_build_reads_back_saved_text(builder, tmp_path):
    result = builder.build(_record(issued_by="이소모터스"), tmp_path / "cert.pdf")

    assert "15000 km" in result.text
    assert "이소모터스" in result.text
    assert result.text == parse_full_text(result.path.read_bytes())


def test_unreadable_output_fails_build(builder, tmp_path, monkeypatch):
    def write_garbage(doc, path):
        path.write_bytes(b"not a pdf")

    monkeypatch.setattr("inspectcert.services.pdf.builder.save", write_garbage)

    with pytest.raises(PdfTextExtractionError):
        builder.build(_record(), tmp_path / "cert.pdf")
