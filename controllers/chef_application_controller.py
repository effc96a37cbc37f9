# controllers/chef_application_controller.py
import html
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from db.database import session_scope
from models.chef_application import ApplicationStatus, ChefApplication
from models.user import User, UserRole
from controllers.chef_controller import ProfessionalProfileSchema, find_chef_by_user_id, materialize_chef
from controllers.user_controller import get_user_or_404
from utils.email_service import send_email_async
from utils.errors import DuplicateResource, Forbidden, InvalidState, NotFound

# one extra attempt after a concurrent chef insert
REVIEW_ATTEMPTS = 2


# ---- Pydantic models ----
class ChefApplicationSchema(ProfessionalProfileSchema):
    pass


class ReviewSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Literal["Approved", "Rejected"]
    admin_remarks: Optional[str] = Field("", max_length=2000)


# ---- DTO ----
def serialize_application(application: ChefApplication, user: Optional[User]) -> dict:
    return {
        "id": application.id,
        "userId": application.user_id,
        "username": user.username if user else "Unknown",
        "fullName": user.full_name if user else "Unknown",
        "email": user.email if user else "Unknown",
        "specialtyCuisine": application.specialty_cuisine,
        "yearsOfExperience": application.years_of_experience,
        "certificationName": application.certification_name,
        "certificationImageUrl": application.certification_image_url,
        "portfolioLink": application.portfolio_link,
        "biography": application.biography,
        "status": application.status,
        "adminRemarks": application.admin_remarks,
        "dateApplied": application.date_applied.isoformat() if application.date_applied else None,
        "dateReviewed": application.date_reviewed.isoformat() if application.date_reviewed else None,
    }


def _get_application_or_404(session, application_id: int) -> ChefApplication:
    application = session.get(ChefApplication, application_id)
    if application is None:
        raise NotFound("Application not found.")
    return application


def find_active_application(session, user_id: int) -> Optional[ChefApplication]:
    """A Pending or Approved application of user_id, if any."""
    return session.query(ChefApplication).filter(
        ChefApplication.user_id == user_id,
        ChefApplication.status.in_([ApplicationStatus.PENDING.value, ApplicationStatus.APPROVED.value]),
    ).first()


# ---- Submission ----
def submit_application(user_id: int, payload: dict, flask_app) -> dict:
    """
    Validates payload and stores a Pending application for user_id.
    May raise pydantic.ValidationError on invalid input.
    """
    data = ChefApplicationSchema.model_validate(payload)

    with session_scope() as session:
        user = get_user_or_404(session, user_id)

        active = find_active_application(session, user_id)
        if active is not None:
            if active.status == ApplicationStatus.APPROVED.value:
                raise DuplicateResource("You are already a chef.")
            raise DuplicateResource("You already have a pending application.")

        if find_chef_by_user_id(session, user_id) is not None:
            raise DuplicateResource("You are already a chef.")

        application = ChefApplication(
            user_id=user_id,
            specialty_cuisine=data.specialty_cuisine,
            years_of_experience=data.years_of_experience,
            certification_name=data.certification_name,
            certification_image_url=data.certification_image_url,
            portfolio_link=data.portfolio_link,
            biography=data.biography,
            status=ApplicationStatus.PENDING.value,
            admin_remarks="",
            date_applied=datetime.utcnow(),
        )
        session.add(application)
        try:
            session.flush()
        except IntegrityError:
            # lost a race with another submission for the same user
            raise DuplicateResource("You already have a pending application.")

        result = serialize_application(application, user)

    flask_app.logger.info("Chef application id=%s submitted by user id=%s", result["id"], user_id)
    _notify_admin_of_submission(flask_app, result)
    return result


# ---- Queries ----
def get_application(application_id: int) -> dict:
    with session_scope() as session:
        application = _get_application_or_404(session, application_id)
        return serialize_application(application, application.user)


def list_user_applications(user_id: int) -> list:
    with session_scope() as session:
        applications = (
            session.query(ChefApplication)
            .options(joinedload(ChefApplication.user))
            .filter(ChefApplication.user_id == user_id)
            .order_by(ChefApplication.date_applied.desc(), ChefApplication.id.desc())
            .all()
        )
        return [serialize_application(a, a.user) for a in applications]


def list_applications(status: Optional[str] = None) -> list:
    """All applications, newest first, optionally filtered by exact status."""
    with session_scope() as session:
        query = session.query(ChefApplication).options(joinedload(ChefApplication.user))
        if status:
            query = query.filter(ChefApplication.status == status)
        applications = query.order_by(ChefApplication.date_applied.desc(), ChefApplication.id.desc()).all()
        return [serialize_application(a, a.user) for a in applications]


def list_pending_applications() -> list:
    return list_applications(ApplicationStatus.PENDING.value)


# ---- Review ----
def _apply_review(session, application_id: int, decision: ApplicationStatus, remarks: str, flask_app) -> dict:
    """
    Approval materializes the chef profile and promotes the applicant to Chef.
    An Admin applicant keeps the Admin role, unlike the unconditional Chef
    promotion of the legacy approval flow, so approving never removes admin access.
    """
    application = _get_application_or_404(session, application_id)
    user = get_user_or_404(session, application.user_id)

    now = datetime.utcnow()
    # compare-and-set: only one reviewer can move the application out of Pending
    updated = (
        session.query(ChefApplication)
        .filter(
            ChefApplication.id == application_id,
            ChefApplication.status == ApplicationStatus.PENDING.value,
        )
        .update(
            {
                ChefApplication.status: decision.value,
                ChefApplication.admin_remarks: remarks,
                ChefApplication.date_reviewed: now,
            },
            synchronize_session=False,
        )
    )
    if updated == 0:
        raise InvalidState("Application has already been reviewed.")
    session.refresh(application)

    if decision == ApplicationStatus.APPROVED:
        chef, created = materialize_chef(session, user.id, application, approved_date=now)
        if created:
            flask_app.logger.info("Chef profile id=%s materialized for user id=%s", chef.id, user.id)
        else:
            flask_app.logger.info("User id=%s already has chef profile id=%s", user.id, chef.id)
        if user.role != UserRole.ADMIN.value:
            user.role = UserRole.CHEF.value

    return serialize_application(application, user)


def review_application(application_id: int, payload: dict, flask_app) -> dict:
    """
    Moves a Pending application to Approved or Rejected.
    Status update, chef creation and role promotion commit together.
    May raise pydantic.ValidationError on invalid input.
    """
    review = ReviewSchema.model_validate(payload)
    decision = ApplicationStatus(review.status)
    remarks = review.admin_remarks or ""

    for attempt in range(1, REVIEW_ATTEMPTS + 1):
        try:
            with session_scope() as session:
                result = _apply_review(session, application_id, decision, remarks, flask_app)
            break
        except IntegrityError:
            # chefs.user_id is unique: someone else created the profile meanwhile,
            # the retry finds it and skips the insert
            if attempt == REVIEW_ATTEMPTS:
                raise
            flask_app.logger.warning(
                "Chef profile conflict while reviewing application id=%s, retrying", application_id
            )

    flask_app.logger.info("Chef application id=%s reviewed: %s", application_id, result["status"])
    _notify_applicant_of_decision(flask_app, result)
    return result


def approve_application(application_id: int, flask_app) -> dict:
    return review_application(
        application_id, {"status": ApplicationStatus.APPROVED.value, "adminRemarks": ""}, flask_app
    )


def reject_application(application_id: int, remarks: Optional[str], flask_app) -> dict:
    return review_application(
        application_id, {"status": ApplicationStatus.REJECTED.value, "adminRemarks": remarks or ""}, flask_app
    )


# ---- Deletion ----
def delete_application(application_id: int, user_id: int, flask_app) -> None:
    with session_scope() as session:
        application = _get_application_or_404(session, application_id)

        if application.user_id != user_id:
            raise Forbidden("You can only delete your own application.")

        if application.status != ApplicationStatus.PENDING.value:
            raise InvalidState("Cannot delete a reviewed application.")

        session.delete(application)

    flask_app.logger.info("Chef application id=%s deleted by user id=%s", application_id, user_id)


# ---- Notifications ----
def _notify_admin_of_submission(flask_app, application: dict):
    admin_email = flask_app.config.get("ADMIN_EMAIL")
    if not admin_email:
        return

    esc = lambda s: html.escape(str(s)) if s is not None else "-"

    subject = "New chef application awaiting review"
    text_body = (
        "Hello Team,\n\n"
        f"{application['username']} ({application['email']}) applied to become a chef.\n"
        f"Cuisine: {application['specialtyCuisine']}\n"
        f"Experience: {application['yearsOfExperience']} years\n"
        f"Certification: {application['certificationName']}\n\n"
        "Please review it from the admin dashboard.\n"
    )
    html_body = f"""
    <html><body>
      <p>Hello Team,</p>
      <p><strong>{esc(application['username'])}</strong> ({esc(application['email'])}) applied to become a chef.</p>
      <table cellpadding="4" cellspacing="0" border="0">
        <tr><td><strong>Cuisine:</strong></td><td>{esc(application['specialtyCuisine'])}</td></tr>
        <tr><td><strong>Experience:</strong></td><td>{esc(application['yearsOfExperience'])} years</td></tr>
        <tr><td><strong>Certification:</strong></td><td>{esc(application['certificationName'])}</td></tr>
      </table>
      <p>Please review it from the admin dashboard.</p>
    </body></html>
    """
    try:
        send_email_async(flask_app, subject, [admin_email], html_body, text_body)
    except Exception:
        flask_app.logger.exception("Failed to enqueue submission email")


def _notify_applicant_of_decision(flask_app, application: dict):
    email = application.get("email")
    if not email or email == "Unknown":
        return

    approved = application["status"] == ApplicationStatus.APPROVED.value
    name = application.get("fullName") or application.get("username")
    subject = "Your chef application was approved" if approved else "Your chef application was reviewed"
    outcome = (
        "Congratulations, your chef application has been approved. You can now publish recipes and courses."
        if approved
        else "Unfortunately your chef application was not approved this time."
    )
    remarks = application.get("adminRemarks") or ""

    text_body = f"Dear {name},\n\n{outcome}\n"
    if remarks:
        text_body += f"\nRemarks from the reviewer: {remarks}\n"
    html_body = f"""
    <html><body>
      <p>Dear {html.escape(str(name))},</p>
      <p>{html.escape(outcome)}</p>
      {f"<p><strong>Remarks:</strong> {html.escape(remarks)}</p>" if remarks else ""}
    </body></html>
    """
    try:
        send_email_async(flask_app, subject, [email], html_body, text_body)
    except Exception:
        flask_app.logger.exception("Failed to enqueue decision email")
