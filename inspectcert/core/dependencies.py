from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from inspectcert.core.config import settings
from inspectcert.core.security import verify_access_token
from inspectcert.db.core import get_session
from inspectcert.services.certificate import CertificateService
from inspectcert.services.pdf.builder import CertificatePdfBuilder, PdfEngineConfig
from inspectcert.services.storage import StorageService, get_storage_backend

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


@lru_cache
def get_pdf_builder() -> CertificatePdfBuilder:
    """Template and font are resolved once per process."""
    return CertificatePdfBuilder(PdfEngineConfig.from_settings(settings))


@lru_cache
def get_storage() -> StorageService:
    return get_storage_backend(settings.storage_backend)


def get_certificate_service(
    session: Session = Depends(get_session),
    pdf_builder: CertificatePdfBuilder = Depends(get_pdf_builder),
    storage: StorageService = Depends(get_storage),
) -> CertificateService:
    return CertificateService(
        session=session,
        pdf_builder=pdf_builder,
        storage=storage,
        output_dir=settings.output_dir,
        storage_folder=settings.storage_folder,
    )


def get_current_issuer(token: str = Depends(oauth2_scheme)) -> str:
    """
    Validates the bearer token and returns the caller identity (token subject).
    """
    subject = verify_access_token(token)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return subject
