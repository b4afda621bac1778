from typing import Optional
from datetime import datetime, date, timezone
import uuid
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    """
    Standard audit timestamps for database records.
    """
    created_at: datetime = Field(
        default_factory=utc_now,
        description="UTC timestamp when this record was first persisted."
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"onupdate": utc_now},
        description="UTC timestamp when this record was last modified."
    )


class Certificate(TimestampMixin, SQLModel, table=True):
    """
    One issued vehicle inspection certificate.

    The VIN is the natural key: a vehicle is certified at most once, and
    re-issuing returns this record. A row is only written after the generated
    document has been uploaded, so `pdf_url` is always set on stored records.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True
    )
    cert_number: str = Field(
        unique=True,
        index=True,
        max_length=64,
        description="Human readable certificate number. Example: 'CERT-20261017-4F9A2C'"
    )
    issue_date: date = Field(description="Date the certificate was issued.")
    expire_date: date = Field(
        description="Expiry date, one year after issue unless requested otherwise.")
    inspect_date: Optional[date] = Field(default=None)

    manufacturer: Optional[str] = Field(default=None, max_length=150)
    model_name: Optional[str] = Field(default=None, max_length=150)
    vin: str = Field(
        unique=True,
        index=True,
        max_length=64,
        description="Vehicle identification number. Example: 'KMHXX00XXXX000001'"
    )
    manufacture_year: Optional[int] = Field(default=None)
    first_register_date: Optional[date] = Field(default=None)
    mileage: Optional[int] = Field(default=None, description="Odometer reading in km.")

    inspector_code: Optional[str] = Field(default=None, max_length=50)
    inspector_name: Optional[str] = Field(default=None, max_length=100)
    signature_path: Optional[str] = Field(default=None)
    issued_by: Optional[str] = Field(
        default=None,
        max_length=150,
        description="Issuing organisation, defaults to the authenticated caller."
    )

    pdf_url: Optional[str] = Field(
        default=None, description="Public URL of the generated document.")
    pdf_storage_key: Optional[str] = Field(
        default=None, description="Object storage key of the generated document.")
