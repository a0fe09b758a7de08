from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def register_errors(app: Flask):
    @app.errorhandler(400)
    def bad_request(e: HTTPException):
        if _wants_json():
            return jsonify({"error": e.description or "bad request"}), 400
        return e

    @app.errorhandler(404)
    def not_found(e: HTTPException):
        if _wants_json():
            return jsonify({"error": "not found"}), 404
        return e

    @app.errorhandler(500)
    def server_error(e):
        if _wants_json():
            return jsonify({"error": "server error"}), 500
        return "Internal server error", 500
