from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials, HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging
import uuid

import bcrypt
from jose import jwt, JWTError

from products_manager.config import get_settings
from products_manager.models.user import User, get_db
from products_manager.utils.errors import Forbidden

logger = logging.getLogger(__name__)
settings = get_settings()

http_basic = HTTPBasic(auto_error=False)
http_bearer = HTTPBearer(auto_error=False)


# ===== Password helpers =====
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.user_login == username).first()
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


# ===== JWT helpers =====
def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "exp": expire, "iat": now, "nbf": now, "jti": uuid.uuid4().hex}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    return payload.get("sub")


def get_current_user(
    bearer: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    basic: Optional[HTTPBasicCredentials] = Depends(http_basic),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the caller from a bearer token or basic credentials; None when anonymous."""
    if bearer and bearer.credentials:
        login = decode_access_token(bearer.credentials)
        if not login:
            return None
        return db.query(User).filter(User.user_login == login).first()
    if basic and basic.username:
        return authenticate(db, basic.username, basic.password)
    return None


def require_edit_capability(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None or not user.can("edit_posts"):
        logger.info("Permission denied for %s", user.user_login if user else "anonymous")
        raise Forbidden()
    return user
