from inspectcert.core.config import settings
from sqlmodel import Session, create_engine


connect_args = {}
if settings.database_url.startswith("sqlite"):
    # FastAPI serves sync endpoints from a thread pool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.database_url, connect_args=connect_args)


def get_session():
    with Session(engine) as session:
        yield session
