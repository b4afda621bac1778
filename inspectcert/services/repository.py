from typing import Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from inspectcert.core.exceptions import DuplicateCertificateError
from inspectcert.db.schema import Certificate


class CertificateRepository:
    """Persistence of issued certificates. VIN and number are unique columns."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_vin(self, vin: str) -> Optional[Certificate]:
        return self.session.exec(
            select(Certificate).where(Certificate.vin == vin)
        ).first()

    def find_by_cert_number(self, cert_number: str) -> Optional[Certificate]:
        return self.session.exec(
            select(Certificate).where(Certificate.cert_number == cert_number)
        ).first()

    def save(self, cert: Certificate) -> Certificate:
        """
        Inserts or updates the record.

        Raises:
            DuplicateCertificateError: a unique constraint rejected the write.
        """
        try:
            self.session.add(cert)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Unique constraint violated for VIN {cert.vin}: {e.orig}")
            raise DuplicateCertificateError(cert.vin) from e
        except SQLAlchemyError:
            self.session.rollback()
            raise

        self.session.refresh(cert)
        return cert
