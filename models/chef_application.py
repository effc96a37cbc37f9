# models/chef_application.py
from enum import Enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index, text
from sqlalchemy.orm import relationship

from models.user import Base


class ApplicationStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ChefApplication(Base):
    __tablename__ = "chef_applications"
    __table_args__ = (
        # at most one Pending application per user
        Index(
            "uq_chef_applications_pending_user",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'Pending'"),
            postgresql_where=text("status = 'Pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    specialty_cuisine = Column(String(100), nullable=False)
    years_of_experience = Column(Integer, nullable=False, default=0)
    certification_name = Column(String(200), nullable=False)
    certification_image_url = Column(String(500), nullable=False, default="")
    portfolio_link = Column(String(500), nullable=False, default="")
    biography = Column(Text, nullable=False)

    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    admin_remarks = Column(Text, nullable=False, default="")
    date_applied = Column(DateTime, nullable=False, default=datetime.utcnow)
    date_reviewed = Column(DateTime, nullable=True)

    user = relationship("User")

    def __repr__(self):
        return f"ChefApplication({self.id}, user={self.user_id}, '{self.status}')"
