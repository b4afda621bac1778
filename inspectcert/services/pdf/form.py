"""
Low level helpers for the interactive form (AcroForm) of a PyMuPDF document.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import fitz


@dataclass
class FormDirectory:
    """
    Widgets of a document grouped by fully qualified field name.

    Holds on to the pages so the widgets stay bound to them while the
    directory is in use.
    """
    pages: List[fitz.Page]
    widgets: Dict[str, List[fitz.Widget]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[List[fitz.Widget]]:
        return self.widgets.get(name)

    def names(self) -> List[str]:
        return list(self.widgets)

    def items(self) -> Iterator[Tuple[str, List[fitz.Widget]]]:
        return iter(self.widgets.items())


def load_directory(doc: fitz.Document) -> FormDirectory:
    directory = FormDirectory(pages=[page for page in doc])
    for page in directory.pages:
        for widget in page.widgets():
            directory.widgets.setdefault(widget.field_name, []).append(widget)
    return directory


def xref_of(value: str) -> int:
    """'12 0 R' -> 12"""
    return int(value.split()[0])


def resolve_key(doc: fitz.Document, xref: int, path: str) -> Tuple[int, str]:
    """
    Follows indirect references along a key path such as 'AcroForm/DR/Font/F1'.

    Returns the object that directly contains the remaining path, so a value
    can be set without writing through an indirect object.
    """
    keys = path.split("/")
    prefix: List[str] = []
    for key in keys[:-1]:
        kind, value = doc.xref_get_key(xref, "/".join(prefix + [key]))
        if kind == "xref":
            xref, prefix = xref_of(value), []
        else:
            prefix.append(key)
    return xref, "/".join(prefix + [keys[-1]])


def set_key(doc: fitz.Document, xref: int, path: str, value: str) -> None:
    target, key = resolve_key(doc, xref, path)
    doc.xref_set_key(target, key, value)


def get_key(doc: fitz.Document, xref: int, path: str) -> Tuple[str, str]:
    target, key = resolve_key(doc, xref, path)
    return doc.xref_get_key(target, key)
