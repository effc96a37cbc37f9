# routes/manage_users.py
from flask import Blueprint, current_app, jsonify, request

from controllers import chef_controller, user_controller
from models.user import UserRole
from routes.common import json_body, json_object_body
from utils.auth import authorize_request
from utils.uploads import save_certification_image

bp = Blueprint("manage_users", __name__, url_prefix="/api/ManageUser")


@bp.before_request
def admin_only():
    # CORS preflight carries no token
    if request.method != "OPTIONS":
        authorize_request(UserRole.ADMIN.value)


@bp.route("", methods=["GET"])
def list_users():
    return jsonify(user_controller.list_users())


@bp.route("/users/<int:user_id>", methods=["GET"])
def get_user(user_id):
    return jsonify(user_controller.get_user(user_id))


@bp.route("/update-role/<int:user_id>", methods=["POST"])
def update_role(user_id):
    user = user_controller.update_role(user_id, json_body())
    current_app.logger.info("Role of user id=%s set to %s", user_id, user["role"])
    return jsonify({"message": "User role updated.", "user": user})


@bp.route("/ban/<int:user_id>", methods=["POST"])
def ban_user(user_id):
    user = user_controller.ban_user(user_id)
    current_app.logger.info("User id=%s banned", user_id)
    return jsonify({"message": "User banned.", "user": user})


@bp.route("/create-chef/<int:user_id>", methods=["POST"])
def create_chef(user_id):
    chef = chef_controller.create_chef(user_id, json_object_body(), current_app)
    return jsonify(chef), 201


@bp.route("/chef/<int:user_id>", methods=["GET"])
def get_chef(user_id):
    return jsonify(chef_controller.get_chef(user_id))


@bp.route("/delete-chef/<int:user_id>", methods=["DELETE"])
def delete_chef(user_id):
    chef_controller.delete_chef(user_id, current_app)
    return jsonify({"message": "Chef profile deleted."})


@bp.route("/upload-certification/<int:user_id>", methods=["POST"])
def upload_certification(user_id):
    image_url = save_certification_image(
        request.files.get("file"),
        current_app.config["UPLOAD_FOLDER"],
        request.host_url,
        current_app.config["MAX_UPLOAD_BYTES"],
    )
    current_app.logger.info("Certification uploaded for user id=%s", user_id)
    return jsonify({"certificationImageUrl": image_url})
