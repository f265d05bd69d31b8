from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings


def _connect_args(url: str) -> dict:
    """Driver-specific connect arguments for the configured database URL."""
    if url.startswith("postgresql"):
        return {"connect_timeout": settings.DB_CONNECT_TIMEOUT}
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Create SQLAlchemy engine (once per process)
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    connect_args=_connect_args(settings.SQLALCHEMY_DATABASE_URI),
    pool_pre_ping=True,  # Verify connections before using them
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Imports the models so they register on Base.metadata. Tables are created
    by "alembic upgrade head"; set DB_CREATE_TABLES=true to create them here
    instead (handy for throwaway local databases).
    """
    from app.models import job, user  # noqa: F401  Import models to register them

    if settings.DB_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
