# controllers/auth_controller.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from db.database import session_scope
from models.user import User, UserRole
from controllers.user_controller import serialize_user
from utils.auth import create_access_token, hash_password, verify_password
from utils.errors import DuplicateResource, Forbidden, Unauthorized


# ---- Pydantic models ----
class RegisterSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field("", max_length=200)
    phone: Optional[str] = Field(None, max_length=20)


class LoginSchema(BaseModel):
    email: EmailStr
    password: str


def register_user(payload: dict, flask_app) -> dict:
    """
    Validates payload and stores a new user with a hashed password.
    May raise pydantic.ValidationError on invalid input.
    """
    data = RegisterSchema.model_validate(payload)

    with session_scope() as session:
        existing = session.query(User).filter(
            or_(User.email == data.email, User.username == data.username)
        ).first()
        if existing:
            if existing.email == data.email:
                raise DuplicateResource("Email already registered.")
            raise DuplicateResource("Username already taken.")

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            full_name=data.full_name,
            phone=data.phone,
            role=UserRole.USER.value,
        )
        session.add(user)
        try:
            session.flush()
        except IntegrityError:
            raise DuplicateResource("Email already registered.")

        flask_app.logger.info("Registered user id=%s username=%s", user.id, user.username)
        return serialize_user(user)


def login_user(payload: dict, flask_app) -> dict:
    data = LoginSchema.model_validate(payload)

    with session_scope() as session:
        user = session.query(User).filter(User.email == data.email).first()
        if user is None or not verify_password(data.password, user.password_hash):
            flask_app.logger.info("Failed login for %s", data.email)
            raise Unauthorized("Invalid email or password.")
        if user.is_banned:
            raise Forbidden("Account is banned")

        return {
            "message": "Login successful",
            "token": create_access_token(user),
            "user": {
                "id": user.id,
                "username": user.username,
                "email": user.email,
                "role": user.role,
            },
        }
