"""
Expense routes.

Every route here is protected. The fixed filter paths are registered
alongside /expenses/<expense_id>; werkzeug matches static segments
before the converter, so /expenses/week never reaches get_expense.
"""

from flask import Blueprint, jsonify, request

from expense_tracker.web.context import (
    components,
    current_caller,
    json_body,
    parse_id,
    require_caller,
)


expenses_bp = Blueprint("expenses", __name__, url_prefix="/expenses")


def _listing(expenses):
    return jsonify([expense.to_public_dict() for expense in expenses]), 200


@expenses_bp.route("", methods=["POST"])
@require_caller
async def create_expense():
    body = json_body()
    expense = await components().ledger.create(
        current_caller().user_id,
        title=body.get("title"),
        description=body.get("description"),
        amount=body.get("amount"),
        date=body.get("date"),
        category=body.get("category"),
    )
    return jsonify(expense.to_public_dict()), 201


@expenses_bp.route("", methods=["GET"])
@require_caller
async def list_expenses():
    return _listing(await components().ledger.list_mine(current_caller().user_id))


@expenses_bp.route("/week", methods=["GET"])
@require_caller
async def expenses_past_week():
    return _listing(await components().queries.by_week(current_caller().user_id))


@expenses_bp.route("/month", methods=["GET"])
@require_caller
async def expenses_past_month():
    return _listing(await components().queries.by_month(current_caller().user_id))


@expenses_bp.route("/past-three-month", methods=["GET"])
@require_caller
async def expenses_past_quarter():
    return _listing(await components().queries.by_quarter(current_caller().user_id))


@expenses_bp.route("/dates", methods=["GET"])
@require_caller
async def expenses_by_dates():
    return _listing(await components().queries.by_custom_range(
        current_caller().user_id,
        request.args.get("start_date"),
        request.args.get("end_date"),
    ))


@expenses_bp.route("/category", methods=["GET"])
@require_caller
async def expenses_by_category():
    return _listing(await components().queries.by_category(
        current_caller().user_id,
        request.args.get("category"),
    ))


@expenses_bp.route("/<expense_id>", methods=["GET"])
@require_caller
async def get_expense(expense_id):
    expense = await components().ledger.get(current_caller().user_id, parse_id(expense_id))
    return jsonify(expense.to_public_dict()), 200


@expenses_bp.route("/<expense_id>", methods=["PATCH"])
@require_caller
async def update_expense(expense_id):
    expense = await components().ledger.update(
        current_caller().user_id,
        parse_id(expense_id),
        request.get_json(silent=True),
    )
    return jsonify(expense.to_public_dict()), 202


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@require_caller
async def delete_expense(expense_id):
    await components().ledger.delete(current_caller().user_id, parse_id(expense_id))
    return "", 204
