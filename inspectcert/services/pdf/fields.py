from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, List, Tuple

from inspectcert.services.pdf.formatting import (
    DATE_FORMAT, format_date, format_mileage, format_number, format_text
)


@dataclass(frozen=True)
class TemplateField:
    """Binds a certificate attribute to a form field of the template."""
    attribute: str
    template_name: str
    kind: str = "text"


TEMPLATE_FIELDS: Tuple[TemplateField, ...] = (
    TemplateField("cert_number", "certNumber"),
    TemplateField("issue_date", "issueDate_es_:date", "date"),
    TemplateField("expire_date", "expireDate_es_:date", "date"),
    TemplateField("inspect_date", "inspectDate_es_:date", "date"),
    TemplateField("manufacturer", "manu_es_:fullname"),
    TemplateField("model_name", "modelName"),
    TemplateField("vin", "vin"),
    TemplateField("manufacture_year", "manufactureYear_es_:date", "number"),
    TemplateField("first_register_date", "firstRegisterDate_es_:date", "date"),
    TemplateField("mileage", "mileage", "mileage"),
    TemplateField("inspector_code", "inspectorCode"),
    TemplateField("inspector_name", "inspectorName_es_:fullname"),
    TemplateField("issued_by", "corpName_es_:fullname"),
)


def _formatters(date_format: str) -> dict:
    return {
        "text": format_text,
        "date": partial(format_date, pattern=date_format),
        "number": format_number,
        "mileage": format_mileage,
    }


def render_fields(
    record: Any,
    fields: Tuple[TemplateField, ...] = TEMPLATE_FIELDS,
    date_format: str = DATE_FORMAT,
) -> List[Tuple[str, str]]:
    """
    Computes the display string of every mapped field.

    Returns (template field name, display value) pairs in map order.
    """
    formatters: dict[str, Callable[[Any], str]] = _formatters(date_format)
    return [
        (field.template_name, formatters[field.kind](getattr(record, field.attribute, None)))
        for field in fields
    ]
