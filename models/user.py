# models/user.py
from enum import Enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UserRole(str, Enum):
    USER = "User"
    CHEF = "Chef"
    ADMIN = "Admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(128), nullable=False)
    full_name = Column(String(200), nullable=False, default="")
    phone = Column(String(20), nullable=True)

    # free text in storage, one of UserRole in practice
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    is_banned = Column(Boolean, nullable=False, default=False)
    avatar_url = Column(String(500), nullable=False, default="")

    join_date = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"User('{self.username}', '{self.email}', '{self.role}')"
