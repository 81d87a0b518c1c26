import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from products_manager.config import get_settings
from products_manager.models.user import User
from products_manager.utils.security import hash_password

logger = logging.getLogger(__name__)


def provision_test_user(db: Session) -> Optional[User]:
    """Create the editor test account once. Returns the new user, or None if it already existed."""
    settings = get_settings()
    login = settings.TEST_USER_LOGIN
    if db.query(User).filter(User.user_login == login).first():
        return None
    user = User(
        user_login=login,
        email=settings.TEST_USER_EMAIL,
        password_hash=hash_password(settings.TEST_USER_PASSWORD),
        role="editor",
        show_admin_bar=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another worker created it first
        db.rollback()
        return None
    db.refresh(user)
    logger.info("Provisioned editor user %s", login)
    return user


def should_show_admin_bar(user: Optional[User]) -> bool:
    if user is None:
        return False
    if user.user_login == get_settings().TEST_USER_LOGIN:
        return False
    return bool(user.show_admin_bar)
