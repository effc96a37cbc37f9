# routes/chef_approval.py
"""
Admin approval endpoints kept for the dashboard's older client.
They share the review rules of routes/chef_applications.py.
"""
from flask import Blueprint, current_app, jsonify, request

from controllers import chef_application_controller as applications
from models.user import UserRole
from routes.common import json_body
from utils.auth import authorize_request
from utils.errors import ValidationFailed

bp = Blueprint("chef_approval", __name__, url_prefix="/api/ChefApproval")


@bp.before_request
def admin_only():
    # CORS preflight carries no token
    if request.method != "OPTIONS":
        authorize_request(UserRole.ADMIN.value)


@bp.route("/pending", methods=["GET"])
def pending_applications():
    return jsonify(applications.list_pending_applications())


@bp.route("/<int:application_id>", methods=["GET"])
def get_application(application_id):
    return jsonify(applications.get_application(application_id))


@bp.route("/approve/<int:application_id>", methods=["POST"])
def approve_application(application_id):
    applications.approve_application(application_id, current_app)
    return jsonify({"message": "Application Approved"})


@bp.route("/reject/<int:application_id>", methods=["POST"])
def reject_application(application_id):
    # body is a bare JSON string with the reason
    remarks = json_body(default="")
    if remarks is None:
        remarks = ""
    if not isinstance(remarks, str):
        raise ValidationFailed("Rejection reason must be a JSON string.")
    applications.reject_application(application_id, remarks, current_app)
    return jsonify({"message": "Application Rejected"})
