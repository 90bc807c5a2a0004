from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config import get_settings

DATABASE_URL = get_settings().database_url  # e.g. sqlite:///scanner.db

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
