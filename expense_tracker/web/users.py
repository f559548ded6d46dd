"""Routes for the caller's own account."""

from flask import Blueprint, jsonify

from expense_tracker.web.context import components, current_caller, require_caller


users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.route("/me", methods=["GET"])
@require_caller
async def get_me():
    user = await components().credential_service.get_account(current_caller().user_id)
    return jsonify(user.to_public_dict()), 200


@users_bp.route("/me", methods=["DELETE"])
@require_caller
async def delete_me():
    await components().credential_service.delete_account(current_caller().user_id)
    return "", 204
