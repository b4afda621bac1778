"""create certificate table

Revision ID: b7e2d4c91a05
Revises:
Create Date: 2026-10-17 09:12:44.102391

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = 'b7e2d4c91a05'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade():
    """
    One row per issued certificate. The unique index on 'vin' is what makes
    concurrent issuance for the same vehicle converge on a single record.
    """
    op.create_table(
        'certificate',
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('cert_number', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('expire_date', sa.Date(), nullable=False),
        sa.Column('inspect_date', sa.Date(), nullable=True),
        sa.Column('manufacturer', sqlmodel.sql.sqltypes.AutoString(length=150), nullable=True),
        sa.Column('model_name', sqlmodel.sql.sqltypes.AutoString(length=150), nullable=True),
        sa.Column('vin', sqlmodel.sql.sqltypes.AutoString(length=64), nullable=False),
        sa.Column('manufacture_year', sa.Integer(), nullable=True),
        sa.Column('first_register_date', sa.Date(), nullable=True),
        sa.Column('mileage', sa.Integer(), nullable=True),
        sa.Column('inspector_code', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=True),
        sa.Column('inspector_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=True),
        sa.Column('signature_path', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('issued_by', sqlmodel.sql.sqltypes.AutoString(length=150), nullable=True),
        sa.Column('pdf_url', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('pdf_storage_key', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_certificate_cert_number'), 'certificate', ['cert_number'], unique=True)
    op.create_index(op.f('ix_certificate_vin'), 'certificate', ['vin'], unique=True)


def downgrade():
    op.drop_index(op.f('ix_certificate_vin'), table_name='certificate')
    op.drop_index(op.f('ix_certificate_cert_number'), table_name='certificate')
    op.drop_table('certificate')
