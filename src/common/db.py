import datetime
import logging
import os
import uuid

from dotenv import load_dotenv
from sqlmodel import Field, Session, SQLModel, create_engine

load_dotenv()

db_url = os.getenv("DATABASE_URL", "sqlite:///./datatables.db")
engine = create_engine(db_url)


class Person(SQLModel, table=True):
    __tablename__ = "people"

    person_id: str = Field(primary_key=True, default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(nullable=False)
    age: int | None = Field(default=None, nullable=True)
    email: str | None = Field(default=None, nullable=True)
    homepage: str | None = Field(default=None, nullable=True)

    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc),
        nullable=False,
    )


def create_tables():
    """Create all tables. Handles existing tables gracefully."""
    try:
        SQLModel.metadata.create_all(engine, checkfirst=True)
    except Exception as e:
        # Log but don't fail if tables already exist
        logging.warning(f"Warning during table creation (may be harmless): {e}")


def get_session():
    with Session(engine) as session:
        yield session


SessionDepType = Session
