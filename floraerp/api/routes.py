from __future__ import annotations

from datetime import datetime

from flask import Blueprint, abort, jsonify, request

from ..extensions import db
from ..labels.query import LabelRequestError
from ..labels.service import sheet_from_args
from ..models import catalog_model

api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.get("/ping")
def ping():
    return jsonify({"message": "pong", "timestamp": datetime.utcnow().isoformat()})


@api_bp.get("/catalog/<item_type>")
def catalog(item_type: str):
    try:
        model = catalog_model(item_type)
    except ValueError:
        abort(404)
    rows = db.session.scalars(db.select(model).order_by(model.code)).all()
    return jsonify({
        "type": item_type,
        "items": [
            {
                "id": r.code,
                "name": r.name,
                "price": float(r.price or 0),
                "current_stock": r.current_stock or 0,
            }
            for r in rows
        ],
    })


@api_bp.get("/labels")
def labels():
    try:
        query, sheet = sheet_from_args(request.args)
    except LabelRequestError as exc:
        return jsonify({"error": str(exc)}), 400
    payload = {"type": query.item_type}
    payload.update(sheet.to_dict())
    return jsonify(payload)
