from typing import BinaryIO, Union

import fitz
from loguru import logger

from inspectcert.core.exceptions import PdfTextExtractionError


def parse_full_text(source: Union[bytes, BinaryIO]) -> str:
    """
    Extracts the text of every page of a PDF.

    Accepts raw bytes or a binary stream.
    """
    data = source if isinstance(source, (bytes, bytearray)) else source.read()
    try:
        with fitz.open(stream=data, filetype="pdf") as document:
            text = "".join(page.get_text() for page in document)
    except Exception as e:
        logger.exception("PDF text extraction failed")
        raise PdfTextExtractionError("Could not extract text from PDF.") from e

    logger.debug(f"PDF text (first 500 chars): {text[:500]}")
    return text
