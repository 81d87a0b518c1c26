"""Pytest configuration and fixtures for the products manager."""

import os
import tempfile

# Settings are read at import time; point them at throwaway storage first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MEDIA_ROOT"] = tempfile.mkdtemp(prefix="products-manager-media-")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from products_manager.admin.api import ProductsApi
from products_manager.admin.config import AdminConfig
from products_manager.main import app, create_tables
from products_manager.models.category import Category
from products_manager.models.media import Media
from products_manager.models.user import Base, SessionLocal, User, engine
from products_manager.utils.security import create_access_token, hash_password

BASE_URL = "http://testserver"
PASSWORD = "correct horse"
# bcrypt is slow on purpose; hash once for every test user
PASSWORD_HASH = hash_password(PASSWORD)


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


@pytest.fixture(autouse=True)
def database():
    create_tables()
    yield
    Base.metadata.drop_all(bind=engine)


def make_user(login: str, role: str = "editor", show_admin_bar: bool = True) -> User:
    with SessionLocal() as db:
        user = User(
            user_login=login,
            email=f"{login}@example.com",
            password_hash=PASSWORD_HASH,
            role=role,
            show_admin_bar=show_admin_bar,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
        return user


def make_category(name: str, slug: str | None = None) -> int:
    with SessionLocal() as db:
        category = Category(name=name, slug=slug or name.lower().replace(" ", "-"))
        db.add(category)
        db.commit()
        return category.id


def make_media(url: str = "/media/products/shoe.jpg", thumbnail_url: str | None = None) -> int:
    with SessionLocal() as db:
        media = Media(file_url=url, thumbnail_url=thumbnail_url, mime_type="image/jpeg")
        db.add(media)
        db.commit()
        return media.id


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=user.user_login)}"}


@pytest.fixture()
def editor() -> User:
    return make_user("editor")


@pytest_asyncio.fixture()
async def anon_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def client(editor):
    """HTTPX client authenticated as an editor."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url=BASE_URL,
        headers=bearer(editor),
    ) as test_client:
        yield test_client


def admin_api(token: str, http_client: AsyncClient) -> ProductsApi:
    config = AdminConfig(rest_url=f"{BASE_URL}/jeec/v1/", auth_token=token, admin_url="/admin/")
    return ProductsApi(config, client=http_client)


@pytest_asyncio.fixture()
async def api(editor, anon_client):
    """Admin API client wired to the app in-process."""
    return admin_api(create_access_token(subject=editor.user_login), anon_client)
