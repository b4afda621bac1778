import os
import shutil
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="inspectcert-static-")

import fitz
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from inspectcert.core.dependencies import get_pdf_builder, get_storage
from inspectcert.core.security import create_access_token
from inspectcert.db import schema  # noqa: F401  registers the tables
from inspectcert.db.core import get_session
from inspectcert.services.pdf.builder import PdfEngineConfig
from tests.helpers import ALL_FIELD_NAMES, CountingPdfBuilder, RecordingStorage, build_template


@pytest.fixture(scope="session")
def font_path(tmp_path_factory):
    # Droid Sans Fallback ships with PyMuPDF and covers Hangul
    path = tmp_path_factory.mktemp("fonts") / "cjk.ttf"
    path.write_bytes(fitz.Font("cjk").buffer)
    return path


@pytest.fixture
def template_path(tmp_path):
    return build_template(tmp_path / "template.pdf", ALL_FIELD_NAMES)


@pytest.fixture
def make_config(font_path):
    def _make(template_path, **overrides):
        return PdfEngineConfig(template_path=template_path, font_path=font_path, **overrides)
    return _make


@pytest.fixture
def builder(make_config, template_path):
    return CountingPdfBuilder(make_config(template_path))


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def output_dir(tmp_path):
    path = tmp_path / "out"
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def app(engine, builder, storage, output_dir, monkeypatch):
    from inspectcert.core.config import settings
    from inspectcert.main import app

    monkeypatch.setattr(settings, "output_dir", output_dir)

    def _session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_pdf_builder] = lambda: builder
    app.dependency_overrides[get_storage] = lambda: storage
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('inspector@isoplatform.kr')}"}
