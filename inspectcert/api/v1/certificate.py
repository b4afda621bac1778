from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from inspectcert.core.dependencies import get_certificate_service, get_current_issuer
from inspectcert.core.exceptions import CertificateIssueError
from inspectcert.models.certificate import CertificateRequest, CertificateResponse
from inspectcert.services.certificate import CertificateService, IssueResult


router = APIRouter()


@router.post(
    "/issue",
    response_model=CertificateResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue Certificate",
    description="Generates, stores and records an inspection certificate. "
                "Re-issuing an already certified VIN returns the existing certificate."
)
def issue_certificate(
    payload: CertificateRequest,
    issuer: str = Depends(get_current_issuer),
    service: CertificateService = Depends(get_certificate_service)
):
    logger.info(f"Certificate issue request - VIN: {payload.vin}, issuer: {issuer}")
    try:
        result = service.issue_certificate(payload, issued_by=issuer)
    except CertificateIssueError:
        # Cause is already logged by the service
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while issuing the certificate."
        )

    logger.info(f"Certificate issue completed - number: {result.certificate.cert_number}")
    return service.to_response(result)


@router.get(
    "/{cert_number}",
    response_model=CertificateResponse,
    summary="Get Certificate"
)
def get_certificate(
    cert_number: str,
    issuer: str = Depends(get_current_issuer),
    service: CertificateService = Depends(get_certificate_service)
):
    cert = service.get_certificate(cert_number)
    return service.to_response(IssueResult(certificate=cert, created=False))
