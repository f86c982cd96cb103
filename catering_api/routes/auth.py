from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from catering_api.database import get_session
from catering_api.models.user import User
from catering_api.schemas.user_schemas import Token, UserLogin, UserRegister, UserResponse
from catering_api.utils.hash import hash_password, verify_password
from catering_api.utils.phone import normalize_phone
from catering_api.utils.token import create_access_token

router = APIRouter()


# -------- AUTH ROUTES --------

@router.post("/register", response_model=UserResponse)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    existing_user = session.exec(select(User).where(User.email == payload.email)).first()
    if existing_user:
        raise HTTPException(400, "Email already registered")

    user = User(
        email=payload.email,
        password=hash_password(payload.password),
        name=payload.name,
        phone=normalize_phone(payload.phone) if payload.phone else None,
        role=payload.role,
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    return UserResponse(
        message="Registration successful.",
        user_id=user.id,
        email=user.email,
        role=user.role,
    )


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email)).first()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(401, "Invalid email or password")

    if not user.can_login:
        raise HTTPException(403, "User account is disabled")

    token = create_access_token({"user_id": user.id, "role": user.role})
    return Token(access_token=token, token_type="bearer")
