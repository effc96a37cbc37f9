# routes/auth.py
from flask import Blueprint, jsonify, current_app

from controllers.auth_controller import login_user, register_user
from routes.common import json_object_body

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.route("/register", methods=["POST"])
def register():
    user = register_user(json_object_body(), current_app)
    return jsonify({**user, "message": "User registered successfully!"}), 201


@bp.route("/login", methods=["POST"])
def login():
    return jsonify(login_user(json_object_body(), current_app))
