# app/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.utils.settings import DATABASE_URL, DATABASE_ECHO


def _connect_args(url: str) -> dict:
    # sqlite: jedna sesja na watek, ale te same polaczenie moze przejsc miedzy watkami
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": 30}
    return {}


engine = create_engine(
    DATABASE_URL,
    echo=DATABASE_ECHO,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

Base = declarative_base()


def init_db():
    # modele musza byc zaimportowane zanim create_all zobaczy metadata
    import app.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
