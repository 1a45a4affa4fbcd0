"""SQLAlchemy declarative base and session factory."""

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    pass


def create_session_factory(database_url: str, echo: bool = False) -> sessionmaker:
    """Create the engine, ensure tables exist, and return a session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Ingestion fans out across worker threads
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
