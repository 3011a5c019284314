import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from ..api.dependencies import get_storage
from ..auth.jwt import authenticate_user, create_access_token, get_current_user, get_password_hash
from ..core.rate_limit import throttle
from ..schemas.schemas import Token, UserCreate, UserInDB, UserRead, UserRegister
from ..services.storage import Storage, public_user

logger = logging.getLogger(__name__)

router = APIRouter()

def register_user(storage: Storage, payload: UserRegister) -> UserInDB:
    if storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    return storage.create_user(
        UserCreate(
            **payload.model_dump(exclude={"password"}),
            hashed_password=get_password_hash(payload.password),
        )
    )


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: UserRegister, storage: Storage = Depends(get_storage)) -> UserRead:
    user = register_user(storage, payload)
    return public_user(user)


@router.post("/login", response_model=Token, dependencies=[Depends(throttle("login"))])
def login(form_data: OAuth2PasswordRequestForm = Depends(), storage: Storage = Depends(get_storage)) -> Token:
    user = authenticate_user(storage, form_data.username, form_data.password)
    if not user:
        logger.info("Failed login for username %s", form_data.username)
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token({"sub": str(user.id), "user_type": user.user_type})
    return Token(access_token=access_token, user_type=user.user_type)


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: UserInDB = Depends(get_current_user)) -> UserRead:
    return public_user(current_user)
