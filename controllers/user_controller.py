# controllers/user_controller.py
from typing import Optional

from db.database import session_scope
from models.user import User, UserRole
from utils.errors import NotFound, ValidationFailed


# ---- Store helpers (take an open session) ----
def find_user_by_id(session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def user_exists(session, user_id: int) -> bool:
    return session.query(User.id).filter(User.id == user_id).first() is not None


def get_user_or_404(session, user_id: int) -> User:
    user = find_user_by_id(session, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user


def set_user_role(session, user_id: int, role: str) -> User:
    user = get_user_or_404(session, user_id)
    user.role = role
    return user


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "fullName": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role,
        "isBanned": user.is_banned,
        "avatarUrl": user.avatar_url,
        "joinDate": user.join_date.isoformat() if user.join_date else None,
    }


# ---- Admin operations ----
def list_users():
    with session_scope() as session:
        users = session.query(User).order_by(User.id).all()
        return [serialize_user(u) for u in users]


def get_user(user_id: int) -> dict:
    with session_scope() as session:
        return serialize_user(get_user_or_404(session, user_id))


def update_role(user_id: int, new_role) -> dict:
    valid_roles = [r.value for r in UserRole]
    if not isinstance(new_role, str) or new_role not in valid_roles:
        raise ValidationFailed(f"Invalid role. Must be one of: {valid_roles}")

    with session_scope() as session:
        user = set_user_role(session, user_id, new_role)
        session.flush()
        return serialize_user(user)


def ban_user(user_id: int) -> dict:
    with session_scope() as session:
        user = get_user_or_404(session, user_id)
        user.is_banned = True
        session.flush()
        return serialize_user(user)
