# utils/auth.py
from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import current_app, g, request
from flask_bcrypt import Bcrypt

from db.database import SessionLocal
from models.user import User, UserRole
from utils.errors import Forbidden, Unauthorized

JWT_ALG = "HS256"

bcrypt = Bcrypt()


def init_auth(app):
    bcrypt.init_app(app)


def hash_password(password: str) -> str:
    return bcrypt.generate_password_hash(password).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.check_password_hash(hashed, password)
    except ValueError:
        # malformed hash in storage
        return False


def create_access_token(user: User) -> str:
    cfg = current_app.config
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "role": user.role,
        "iss": cfg["JWT_ISSUER"],
        "aud": cfg["JWT_ISSUER"],
        "iat": now,
        "exp": now + timedelta(minutes=cfg["JWT_EXPIRE_MINUTES"]),
    }
    return jwt.encode(payload, cfg["JWT_SECRET"], algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    cfg = current_app.config
    try:
        return jwt.decode(
            token,
            cfg["JWT_SECRET"],
            algorithms=[JWT_ALG],
            issuer=cfg["JWT_ISSUER"],
            audience=cfg["JWT_ISSUER"],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("Missing bearer token")
    return token.strip()


def load_current_user() -> dict:
    """
    Resolve the bearer token to the stored user. The role is read from the
    database, not the token, so demotions take effect immediately.
    """
    payload = decode_access_token(_bearer_token())
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise Unauthorized("Invalid token")

    session = SessionLocal()
    try:
        user = session.get(User, user_id)
        if user is None:
            raise Unauthorized("User not found")
        return {
            "id": user.id,
            "username": user.username,
            "role": user.role,
            "is_banned": user.is_banned,
        }
    finally:
        session.close()


def authorize_request(*roles) -> dict:
    """Check the bearer token of the current request against roles and stash the user on g."""
    user = load_current_user()
    if user["is_banned"]:
        raise Forbidden("Account is banned")
    if roles and user["role"] not in roles:
        raise Forbidden("You do not have permission to perform this action")
    g.current_user = user
    return user


def authorize_self_or_admin(user_id: int) -> dict:
    """The bearer must be user_id itself or an admin acting for them."""
    user = authorize_request()
    if user["id"] != user_id and user["role"] != UserRole.ADMIN.value:
        raise Forbidden("You can only act on your own behalf")
    return user


def require_role(*roles):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            authorize_request(*roles)
            return view(*args, **kwargs)
        return wrapper
    return decorator
