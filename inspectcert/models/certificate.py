from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON payloads use camelCase keys; snake_case is accepted on input."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class CertificateRequest(CamelModel):
    """
    Payload for issuing a vehicle inspection certificate.

    Only the VIN is required. Missing certificate number, issue date, expiry
    date and issuer are filled in by the service.
    """
    cert_number: Optional[str] = Field(
        default=None, max_length=64, description="Generated when omitted.")
    issue_date: Optional[date] = Field(default=None, description="Defaults to today.")
    expire_date: Optional[date] = Field(
        default=None, description="Defaults to issue date + 1 year.")
    inspect_date: Optional[date] = None
    manufacturer: Optional[str] = Field(default=None, max_length=150)
    model_name: Optional[str] = Field(default=None, max_length=150)
    vin: str = Field(min_length=1, max_length=64, description="Vehicle identification number.")
    manufacture_year: Optional[int] = None
    first_register_date: Optional[date] = None
    mileage: Optional[int] = Field(default=None, ge=0, description="Odometer reading in km.")
    inspector_code: Optional[str] = Field(default=None, max_length=50)
    inspector_name: Optional[str] = Field(default=None, max_length=100)
    signature_path: Optional[str] = None
    issued_by: Optional[str] = Field(
        default=None, max_length=150, description="Defaults to the authenticated caller.")

    @field_validator("vin")
    @classmethod
    def vin_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("VIN must not be blank.")
        return value

    @model_validator(mode="after")
    def expiry_not_before_issue(self):
        if self.expire_date is None:
            return self
        issue_date = self.issue_date or date.today()
        if self.expire_date < issue_date:
            raise ValueError("Expiry date cannot be earlier than the issue date.")
        return self


class CertificateResponse(CamelModel):
    id: UUID
    cert_number: str
    issue_date: date
    expire_date: date
    inspect_date: Optional[date] = None
    manufacturer: Optional[str] = None
    model_name: Optional[str] = None
    vin: str
    manufacture_year: Optional[int] = None
    first_register_date: Optional[date] = None
    mileage: Optional[int] = None
    inspector_code: Optional[str] = None
    inspector_name: Optional[str] = None
    issued_by: Optional[str] = None
    pdf_file_path: Optional[str] = Field(
        default=None, description="Public URL of the generated certificate.")
    warnings: List[str] = Field(
        default_factory=list,
        description="Template fields that could not be filled during this generation."
    )
