# routes/chef_applications.py
from flask import Blueprint, current_app, jsonify, request

from controllers import chef_application_controller as applications
from models.user import UserRole
from routes.common import json_object_body, required_int_arg
from utils.auth import authorize_self_or_admin, require_role
from utils.uploads import save_certification_image

bp = Blueprint("chef_applications", __name__)


@bp.route("", methods=["POST"])
def create_application():
    user_id = required_int_arg("userId")
    authorize_self_or_admin(user_id)
    result =applications.submit_application(user_id, json_object_body(), current_app)
    return jsonify(result), 201


@bp.route("/<int:application_id>", methods=["GET"])
def get_application(application_id):
    return jsonify(applications.get_application(application_id))


@bp.route("/user/<int:user_id>", methods=["GET"])
def get_user_applications(user_id):
    return jsonify(applications.list_user_applications(user_id))


@bp.route("", methods=["GET"])
@require_role(UserRole.ADMIN.value)
def get_all_applications():
    # exact, case-sensitive match
    status = request.args.get("status")
    return jsonify(applications.list_applications(status))


@bp.route("/<int:application_id>/review", methods=["PUT"])
@require_role(UserRole.ADMIN.value)
def review_application(application_id):
    result = applications.review_application(application_id, json_object_body(), current_app)
    return jsonify(result)


@bp.route("/<int:application_id>", methods=["DELETE"])
def delete_application(application_id):
    user_id = required_int_arg("userId")
    authorize_self_or_admin(user_id)
    applications.delete_application(application_id, user_id, current_app)
    return "", 204


@bp.route("/upload-certification", methods=["POST"])
def upload_certification():
    image_url = save_certification_image(
        request.files.get("file"),
        current_app.config["UPLOAD_FOLDER"],
        request.host_url,
        current_app.config["MAX_UPLOAD_BYTES"],
    )
    return jsonify({"imageUrl": image_url})
