# models/chef.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey

from models.user import Base


class Chef(Base):
    __tablename__ = "chefs"

    id = Column(Integer, primary_key=True, index=True)
    # 1:1 with users; not linked to the application it came from
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)

    specialty_cuisine = Column(String(100), nullable=False)
    years_of_experience = Column(Integer, nullable=False, default=0)
    certification_name = Column(String(200), nullable=False)
    certification_image_url = Column(String(500), nullable=False, default="")
    portfolio_link = Column(String(500), nullable=False, default="")
    biography = Column(Text, nullable=False)

    rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)
    approved_date = Column(DateTime, nullable=False, default=datetime.utcnow)
