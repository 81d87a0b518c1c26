from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from products_manager.config import get_settings
from products_manager.models.user import get_db
from products_manager.schemas.user import LoginSchema, TokenOut
from products_manager.utils.errors import RestError
from products_manager.utils.security import authenticate, create_access_token

router = APIRouter()


@router.post("/auth/token", response_model=TokenOut)
def login(credentials: LoginSchema, db: Session = Depends(get_db)):
    user = authenticate(db, credentials.username, credentials.password)
    if not user:
        raise RestError("Invalid username or password.", code="invalid_credentials", status_code=401)
    token = create_access_token(subject=user.user_login)
    return TokenOut(access_token=token, expires_in_minutes=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES)
