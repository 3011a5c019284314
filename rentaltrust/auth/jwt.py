from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from ..api.dependencies import get_storage
from ..config import settings
from ..schemas.schemas import UserInDB
from ..services.storage import Storage

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes
    )
    to_encode = data.copy()
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def authenticate_user(storage: Storage, username: str, password: str) -> Optional[UserInDB]:
    user = storage.get_user_by_username(username)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def get_current_user(token: str = Depends(oauth2_scheme), storage: Storage = Depends(get_storage)) -> UserInDB:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(token)
        user_id: Optional[str] = payload.get("sub")
        if user_id is None or payload.get("type") != "access":
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = storage.get_user(int(user_id))
    if user is None:
        raise credentials_exception
    return user


def require_user_type(*allowed_types: str):
    allowed = set(allowed_types)

    def user_type_checker(user: UserInDB = Depends(get_current_user)) -> UserInDB:
        if user.user_type in allowed:
            return user
        label = " or ".join(sorted(allowed)).capitalize()
        raise HTTPException(status_code=403, detail=f"Forbidden: {label} access required")

    return user_type_checker


require_landlord = require_user_type("landlord")
require_tenant = require_user_type("tenant")
