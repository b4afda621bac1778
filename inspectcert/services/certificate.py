import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List

from fastapi import HTTPException, status
from loguru import logger
from sqlmodel import Session

from inspectcert.core.exceptions import CertificateIssueError, DuplicateCertificateError
from inspectcert.db.schema import Certificate
from inspectcert.models.certificate import CertificateRequest, CertificateResponse
from inspectcert.services.pdf.builder import CertificatePdfBuilder
from inspectcert.services.repository import CertificateRepository
from inspectcert.services.storage import StorageService
from inspectcert.utils.cert_number import generate_cert_number


@dataclass
class IssueResult:
    certificate: Certificate
    created: bool
    warnings: List[str] = field(default_factory=list)


def plus_one_year(value: date) -> date:
    try:
        return value.replace(year=value.year + 1)
    except ValueError:
        # 29 February -> 28 February
        return value.replace(year=value.year + 1, day=28)


@contextmanager
def local_document(path: Path):
    """Yields the local output path and removes the file on every exit path."""
    try:
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


class CertificateService:
    """
    Issues vehicle inspection certificates.

    Flow:
    1. Return the stored certificate if the VIN was already issued.
    2. Build the record (certificate number, issue/expiry defaults, issuer).
    3. Generate the PDF into the local output directory.
    4. Upload it to object storage.
    5. Persist the record, now carrying the document reference.
    6. Remove the local PDF.

    Nothing is persisted before the upload succeeded.
    """

    def __init__(
        self,
        session: Session,
        pdf_builder: CertificatePdfBuilder,
        storage: StorageService,
        output_dir: Path = Path("certificates"),
        storage_folder: str = "certificates",
    ):
        self.session = session
        self.repository = CertificateRepository(session)
        self.pdf_builder = pdf_builder
        self.storage = storage
        self.output_dir = Path(output_dir)
        self.storage_folder = storage_folder

    def issue_certificate(self, request: CertificateRequest, issued_by: str) -> IssueResult:
        """
        Issues a certificate for the requested vehicle, or returns the existing one.

        Args:
            request (CertificateRequest): Validated request payload.
            issued_by (str): Authenticated caller, used when the request names no issuer.

        Returns:
            IssueResult: The certificate, whether it was created now, and the
            field-level warnings of this generation.

        Raises:
            CertificateIssueError: Generation, upload or persistence failed.
        """
        existing = self.repository.find_by_vin(request.vin)
        if existing:
            logger.info(
                f"Certificate already issued for VIN {request.vin}: {existing.cert_number}")
            return IssueResult(certificate=existing, created=False)

        try:
            cert = self._build_entity(request, issued_by)
            local_path = self.output_dir / f"{cert.cert_number}.pdf"

            with local_document(local_path):
                result = self.pdf_builder.build(cert, local_path)

                remote_key = f"{self.storage_folder}/{cert.cert_number}.pdf"
                upload = self.storage.upload(result.path, remote_key)
                cert.pdf_storage_key = upload.storage_key
                cert.pdf_url = upload.public_url

                saved = self.repository.save(cert)

        except DuplicateCertificateError as e:
            # Lost a race against a concurrent issuance for the same VIN
            existing = self.repository.find_by_vin(request.vin)
            if existing:
                logger.warning(
                    f"Concurrent issuance for VIN {request.vin}, returning {existing.cert_number}")
                return IssueResult(certificate=existing, created=False)
            logger.exception(f"Certificate issuance failed for VIN {request.vin}")
            raise CertificateIssueError("Certificate issuance failed.") from e

        except Exception as e:
            logger.exception(f"Certificate issuance failed for VIN {request.vin}")
            raise CertificateIssueError("Certificate issuance failed.") from e

        logger.info(f"Issued certificate {saved.cert_number} for VIN {saved.vin}")
        return IssueResult(certificate=saved, created=True, warnings=result.report.warnings)

    def get_certificate(self, cert_number: str) -> Certificate:
        cert = self.repository.find_by_cert_number(cert_number)
        if not cert:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found."
            )
        return cert

    def _build_entity(self, request: CertificateRequest, issued_by: str) -> Certificate:
        issue_date = request.issue_date or date.today()
        return Certificate(
            cert_number=request.cert_number or generate_cert_number(),
            issue_date=issue_date,
            expire_date=request.expire_date or plus_one_year(issue_date),
            inspect_date=request.inspect_date,
            manufacturer=request.manufacturer,
            model_name=request.model_name,
            vin=request.vin,
            manufacture_year=request.manufacture_year,
            first_register_date=request.first_register_date,
            mileage=request.mileage,
            inspector_code=request.inspector_code,
            inspector_name=request.inspector_name,
            signature_path=request.signature_path,
            issued_by=request.issued_by or issued_by,
        )

    @staticmethod
    def to_response(result: IssueResult) -> CertificateResponse:
        cert = result.certificate
        return CertificateResponse(
            id=cert.id,
            cert_number=cert.cert_number,
            issue_date=cert.issue_date,
            expire_date=cert.expire_date,
            inspect_date=cert.inspect_date,
            manufacturer=cert.manufacturer,
            model_name=cert.model_name,
            vin=cert.vin,
            manufacture_year=cert.manufacture_year,
            first_register_date=cert.first_register_date,
            mileage=cert.mileage,
            inspector_code=cert.inspector_code,
            inspector_name=cert.inspector_name,
            issued_by=cert.issued_by,
            pdf_file_path=cert.pdf_url,
            warnings=result.warnings,
        )
