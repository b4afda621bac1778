class CertificateIssueError(RuntimeError):
    """Raised when an issuance attempt fails after the duplicate check.

    The underlying cause is chained (``raise ... from``) and only ever logged;
    callers receive a generic message.
    """


class DuplicateCertificateError(Exception):
    """A unique constraint (VIN or certificate number) rejected the insert."""

    def __init__(self, vin: str):
        super().__init__(f"Certificate for VIN '{vin}' already exists.")
        self.vin = vin


class TemplateError(Exception):
    """The certificate template cannot be used (unreadable, or has no form)."""


class PdfTextExtractionError(RuntimeError):
    pass
