from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from taskline.database import get_db, unit_of_work, utcnow
from taskline.errors import UnauthorizedError, ValidationError
from taskline.logging_config import get_logger
from taskline.models.user import User
from taskline.schemas.user import UserCreate, UserLogin, UserOut, PrincipalOut
from taskline.utils.auth import Principal, hash_password, verify_password, create_token, get_current_user

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserOut)
def register(user: UserCreate, db: Session = Depends(get_db)):
    exists = db.query(User).filter(User.email == user.email).first()
    if exists:
        raise ValidationError("Email already exists")

    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        # map hashing/validation errors to a 400 so client gets a clear message
        raise ValidationError(str(e))

    new_user = User(
        email=user.email,
        password=hashed,
        name=user.name or user.email.split("@")[0],
        # No verification mail flow; accounts are verified on registration
        email_verified=utcnow(),
    )
    with unit_of_work(db):
        db.add(new_user)
    db.refresh(new_user)
    logger.info(f"Registered user {new_user.id}")
    return new_user


@router.post("/login")
def login(user: UserLogin, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == user.email).first()
    if not db_user or not verify_password(user.password, db_user.password):
        raise UnauthorizedError("Invalid credentials")

    return {"token": create_token(db_user)}


@router.get("/me", response_model=PrincipalOut)
def me(user: Principal = Depends(get_current_user)):
    return PrincipalOut(user_id=user.user_id, email=user.email, name=user.name)
