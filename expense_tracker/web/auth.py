"""Registration and login routes."""

from flask import Blueprint, jsonify

from expense_tracker.web.context import components, json_body


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/register", methods=["POST"])
async def register():
    body = json_body()
    user = await components().credential_service.register(
        first_name=body.get("firstName"),
        last_name=body.get("lastName"),
        email=body.get("email"),
        password=body.get("password"),
    )
    return jsonify(user.to_public_dict()), 201


@auth_bp.route("/login", methods=["POST"])
async def login():
    body = json_body()
    token = await components().credential_service.login(
        body.get("email"),
        body.get("password"),
    )
    return jsonify({"message": "Login successful", "token": token}), 200
