"""
credgen.web.api
Flask application serving the credential endpoints.
"""

import logging
import os
import time
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, g, jsonify, request, send_from_directory
from flask_limiter import Limiter, RateLimitExceeded
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException, MethodNotAllowed, NotFound

from credgen.charsets import PASSWORD_LENGTH, USERNAME_LENGTH
from credgen.config import load_config
from credgen.generator import RandomSource, generate_password, generate_username
from credgen.validation import LengthError, check_length

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self'; font-src 'self'"
    ),
}

STATIC_MAX_AGE = 60 * 60

bp = Blueprint("api", __name__, url_prefix="/api")


def _rng() -> Optional[RandomSource]:
    return current_app.config.get("CREDGEN_RNG")


def _bad_length(err: LengthError):
    return jsonify({"error": err.message}), 400


@bp.route("/generate-credentials", methods=["POST"])
def generate_credentials():
    pass_len = check_length("passwordLength", request.args.get("passwordLength"), PASSWORD_LENGTH)
    if isinstance(pass_len, LengthError):
        return _bad_length(pass_len)
    user_len = check_length("usernameLength", request.args.get("usernameLength"), USERNAME_LENGTH)
    if isinstance(user_len, LengthError):
        return _bad_length(user_len)

    return jsonify({
        "username": generate_username(user_len, _rng()),
        "password": generate_password(pass_len, _rng()),
        "meta": {"usernameLength": user_len, "passwordLength": pass_len},
    })


@bp.route("/generate-password", methods=["POST"])
def generate_password_route():
    length = check_length("length", request.args.get("length"), PASSWORD_LENGTH)
    if isinstance(length, LengthError):
        return _bad_length(length)
    return jsonify({"password": generate_password(length, _rng()), "meta": {"length": length}})


@bp.route("/generate-username", methods=["POST"])
def generate_username_route():
    length = check_length("length", request.args.get("length"), USERNAME_LENGTH)
    if isinstance(length, LengthError):
        return _bad_length(length)
    return jsonify({"username": generate_username(length, _rng()), "meta": {"length": length}})


def _register_static(app: Flask, static_dir: str) -> None:
    root = os.path.abspath(static_dir)

    @app.route("/", methods=["GET", "HEAD"])
    def index():
        return send_from_directory(root, "index.html", max_age=STATIC_MAX_AGE)

    @app.route("/<path:filename>", methods=["GET", "HEAD"])
    def static_file(filename):
        if filename.startswith("api/"):
            _reject_api_method()
        return send_from_directory(root, filename, max_age=STATIC_MAX_AGE)


def _reject_api_method() -> None:
    """Answer 405 for an API route hit with a non-POST method, 404 otherwise."""
    adapter = current_app.url_map.bind_to_environ(request.environ)
    try:
        endpoint, _ = adapter.match(request.path, method="POST")
    except HTTPException:
        raise NotFound() from None
    if endpoint.startswith(bp.name + "."):
        raise MethodNotAllowed(valid_methods=["OPTIONS", "POST"])
    raise NotFound()


def _register_hooks(app: Flask, settings: Dict[str, Any]) -> None:
    allowed_origins = frozenset(settings["allowed_origins"])

    @app.before_request
    def start_timer():
        g.started = time.perf_counter()

    @app.before_request
    def preflight():
        if request.method == "OPTIONS":
            return "", 204

    @app.after_request
    def add_headers(resp):
        for name, value in SECURITY_HEADERS.items():
            resp.headers[name] = value
        origin = request.headers.get("Origin")
        if origin and origin in allowed_origins:
            resp.headers["Access-Control-Allow-Origin"] = origin
            resp.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
            resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
            resp.headers["Access-Control-Max-Age"] = "86400"
            resp.vary.add("Origin")
        return resp

    @app.after_request
    def log_request(resp):
        if request.path.startswith("/api/"):
            started = g.get("started")
            duration = (time.perf_counter() - started) * 1000 if started is not None else 0
            logger.info("%s %s %s %dms", request.method, request.full_path.rstrip("?"),
                        resp.status_code, duration)
        return resp


def _init_limiter(app: Flask, settings: Dict[str, Any]) -> Limiter:
    # registered after the preflight hook so OPTIONS requests are never counted
    app.config["RATELIMIT_HEADERS_ENABLED"] = True
    limiter = Limiter(get_remote_address, app=app, storage_uri="memory://")
    limiter.limit(f"{settings['rate_limit']} per {settings['rate_window_seconds']} seconds")(bp)
    return limiter


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFound)
    def not_found(e):
        return jsonify({"error": "Route not found"}), 404

    @app.errorhandler(RateLimitExceeded)
    def too_many_requests(e):
        return jsonify({"error": "Too many requests. Try again later."}), 429

    @app.errorhandler(HTTPException)
    def http_error(e):
        resp = jsonify({"error": e.description or e.name})
        resp.status_code = e.code or 500
        # keep Allow on 405 responses
        for name, value in e.get_headers():
            if name.lower() != "content-type":
                resp.headers[name] = value
        return resp

    @app.errorhandler(Exception)
    def internal_error(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500


def create_app(settings: Optional[Dict[str, Any]] = None, rng: Optional[RandomSource] = None) -> Flask:
    """
    Build the Flask application.

    ``rng`` replaces the secure random source and is meant for tests only.
    """
    settings = settings if settings is not None else load_config()

    app = Flask(__name__, static_folder=None)
    app.config["CREDGEN_SETTINGS"] = settings
    app.config["CREDGEN_RNG"] = rng

    _register_hooks(app, settings)
    _init_limiter(app, settings)
    _register_error_handlers(app)
    app.register_blueprint(bp)
    if settings.get("static_dir"):
        _register_static(app, settings["static_dir"])
    return app
