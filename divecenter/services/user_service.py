import logging
from sqlalchemy.orm import Session
from sqlalchemy import select
from passlib.context import CryptContext
from divecenter.models.user import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username))


def authenticate(db: Session, username: str, password: str) -> User | None:
    user = get_user_by_username(db, username)
    if not user or not user.is_active or not verify_password(password, user.hashed_password):
        logger.warning("AUDIT: failed login for %r", username)
        return None
    logger.info("AUDIT: user %s logged in (dive center %s)", user.username, user.dive_center_id)
    return user


def create_user(
    db: Session,
    dive_center_id: int,
    username: str,
    password: str,
    email: str,
    role: str = "staff",
) -> User:
    user = User(
        dive_center_id=dive_center_id,
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
