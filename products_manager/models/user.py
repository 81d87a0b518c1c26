from sqlalchemy import Column, Integer, String, Boolean, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from datetime import datetime
import os

try:
    from products_manager.config import get_settings
    settings = get_settings()
    DATABASE_URL = settings.DATABASE_URL
except ImportError:
    DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL is not set. Provide a Postgres URL (postgres:// or postgresql://) or a sqlite:// URL."
    )

# Normalize driver to psycopg (SQLAlchemy 2.x + psycopg3) regardless of incoming scheme
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
elif DATABASE_URL.startswith("postgresql://") and "+" not in DATABASE_URL.split("://", 1)[0]:
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

if DATABASE_URL.startswith("sqlite"):
    engine_kwargs = {"connect_args": {"check_same_thread": False}}
    # In-memory databases live on a single connection shared by every session
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(DATABASE_URL, future=True, **engine_kwargs)
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True, future=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Roles allowed to create and edit content
EDIT_POSTS_ROLES = {"administrator", "editor", "author", "contributor"}


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    user_login = Column(String(60), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="subscriber")  # administrator, editor, author, contributor, subscriber
    show_admin_bar = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    def can(self, capability: str) -> bool:
        if capability == "edit_posts":
            return self.role in EDIT_POSTS_ROLES
        return False

# NOTE: Table creation is handled in products_manager.main startup.
