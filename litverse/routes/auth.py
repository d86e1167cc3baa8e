from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from litverse.database import get_session
from litverse.errors import AuthError, ConflictError
from litverse.models.user import User
from litverse.schemas.user_schemas import UserRegister, UserLogin, Token, profile_dict
from litverse.utils.hash import hash_password, verify_password
from litverse.utils.clock import utc_now
from litverse.utils.token import create_access_token, get_current_user


router = APIRouter()


# -------- AUTH ROUTES --------

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    email = payload.email.lower()

    if session.exec(select(User).where(User.email == email)).first():
        raise ConflictError(details=["email already exists"])

    if session.exec(select(User).where(User.username == payload.username)).first():
        raise ConflictError(details=["username already exists"])

    user = User(
        username=payload.username,
        email=email,
        password=hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )

    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent registration took the email or username first
        session.rollback()
        raise ConflictError(details=["email or username already exists"])
    session.refresh(user)

    token = create_access_token({"user_id": user.id})
    return {
        "message": "Registration successful.",
        "access_token": token,
        "token_type": "bearer",
        "user": profile_dict(user),
    }


@router.post("/login", response_model=Token)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email.lower())).first()

    if not user or not verify_password(payload.password, user.password):
        raise AuthError("Invalid email or password")

    if not user.is_active:
        raise AuthError("Account is deactivated")

    user.last_login = utc_now()
    session.add(user)
    session.commit()

    token = create_access_token({"user_id": user.id})
    return Token(access_token=token, token_type="bearer")


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"user": profile_dict(current_user)}
