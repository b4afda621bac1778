import uuid
from datetime import date
from typing import Optional


def generate_cert_number(today: Optional[date] = None) -> str:
    """
    Generates a certificate number like 'CERT-20261017-4F9A2C'.

    The random part comes from a UUID; the unique index on the certificate
    table is what actually guarantees uniqueness.
    """
    today = today or date.today()
    token = uuid.uuid4().hex[:6].upper()
    return f"CERT-{today:%Y%m%d}-{token}"
