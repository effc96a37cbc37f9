# controllers/chef_controller.py
from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError

from db.database import session_scope
from models.chef import Chef
from models.user import UserRole
from controllers.user_controller import get_user_or_404, user_exists
from utils.errors import DuplicateResource, NotFound


# ---- Pydantic models ----
class ProfessionalProfileSchema(BaseModel):
    """Professional fields shared by chef applications and chef profiles."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    specialty_cuisine: str = Field(..., min_length=1, max_length=100)
    years_of_experience: int = Field(..., ge=0, le=100)
    certification_name: str = Field(..., min_length=1, max_length=200)
    certification_image_url: Optional[str] = Field("", max_length=500)
    portfolio_link: Optional[str] = Field("", max_length=500)
    biography: str = Field(..., min_length=1)

    @field_validator("specialty_cuisine", "certification_name", "biography")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("certification_image_url", "portfolio_link")
    @classmethod
    def none_to_empty(cls, value: Optional[str]) -> str:
        return (value or "").strip()


# ---- Store helpers (take an open session) ----
def find_chef_by_user_id(session, user_id: int) -> Optional[Chef]:
    return session.query(Chef).filter(Chef.user_id == user_id).first()


def materialize_chef(session, user_id: int, profile, approved_date: datetime = None) -> Tuple[Chef, bool]:
    """
    Create the Chef row for user_id from any object carrying the professional
    fields (an application or a ProfessionalProfileSchema).
    Returns (chef, created). An existing row is returned untouched.
    """
    existing = find_chef_by_user_id(session, user_id)
    if existing is not None:
        return existing, False

    chef = Chef(
        user_id=user_id,
        specialty_cuisine=profile.specialty_cuisine,
        years_of_experience=profile.years_of_experience,
        certification_name=profile.certification_name,
        certification_image_url=profile.certification_image_url or "",
        portfolio_link=profile.portfolio_link or "",
        biography=profile.biography,
        rating=0.0,
        total_reviews=0,
        approved_date=approved_date or datetime.utcnow(),
    )
    session.add(chef)
    session.flush()
    return chef, True


def delete_chef_by_user_id(session, user_id: int) -> bool:
    deleted = session.query(Chef).filter(Chef.user_id == user_id).delete(synchronize_session=False)
    return deleted > 0


def serialize_chef(chef: Chef) -> dict:
    return {
        "id": chef.id,
        "userId": chef.user_id,
        "specialtyCuisine": chef.specialty_cuisine,
        "yearsOfExperience": chef.years_of_experience,
        "certificationName": chef.certification_name,
        "certificationImageUrl": chef.certification_image_url,
        "portfolioLink": chef.portfolio_link,
        "biography": chef.biography,
        "rating": chef.rating,
        "totalReviews": chef.total_reviews,
        "approvedDate": chef.approved_date.isoformat() if chef.approved_date else None,
    }


# ---- Admin operations ----
def create_chef(user_id: int, payload: dict, flask_app) -> dict:
    """Admin shortcut that creates a chef profile without an application."""
    profile = ProfessionalProfileSchema.model_validate(payload)

    with session_scope() as session:
        user = get_user_or_404(session, user_id)
        if find_chef_by_user_id(session, user_id) is not None:
            raise DuplicateResource("User already has a chef profile.")

        try:
            chef, _ = materialize_chef(session, user_id, profile)
        except IntegrityError:
            raise DuplicateResource("User already has a chef profile.")

        if user.role != UserRole.ADMIN.value:
            user.role = UserRole.CHEF.value

        flask_app.logger.info("Chef profile id=%s created for user id=%s", chef.id, user_id)
        return serialize_chef(chef)


def get_chef(user_id: int) -> dict:
    with session_scope() as session:
        if not user_exists(session, user_id):
            raise NotFound("User not found.")
        chef = find_chef_by_user_id(session, user_id)
        if chef is None:
            raise NotFound("Chef profile not found.")
        return serialize_chef(chef)


def delete_chef(user_id: int, flask_app) -> None:
    """
    Remove the chef profile and demote the user back to a regular user.
    The application that produced the profile is left as it is.
    """
    with session_scope() as session:
        user = get_user_or_404(session, user_id)
        if not delete_chef_by_user_id(session, user_id):
            raise NotFound("Chef profile not found.")
        if user.role == UserRole.CHEF.value:
            user.role = UserRole.USER.value

    flask_app.logger.info("Chef profile deleted for user id=%s", user_id)
