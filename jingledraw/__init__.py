from __future__ import annotations

import os
import random
from typing import Any, Mapping

from flask import Flask, jsonify

from .errors import SantaError
from .extensions import LOCKS_KEY, RNG_KEY, csrf, db, login_manager, migrate
from .services.locks import GroupLocks
from .services.suggestions import DEFAULT_MODEL
from .views.auth import auth_bp
from .views.groups import groups_bp
from .views.public import public_bp


def _env_int(name: str, default: int | None) -> int | None:
    raw = (os.environ.get(name) or "").strip()
    return int(raw) if raw else default


def _make_rng(seed: int | None) -> random.Random:
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)


def create_app(test_config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///jingledraw.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    app.config["MAX_GROUP_SIZE"] = _env_int("MAX_GROUP_SIZE", 20)
    app.config["JOIN_CODE_LENGTH"] = _env_int("JOIN_CODE_LENGTH", 4)
    # Fixes the draw/join-code randomness; leave unset in production.
    app.config["DRAW_SEED"] = _env_int("DRAW_SEED", None)

    app.config["ANTHROPIC_API_KEY"] = (os.environ.get("ANTHROPIC_API_KEY") or "").strip() or None
    app.config["GIFT_IDEAS_MODEL"] = os.environ.get("GIFT_IDEAS_MODEL", DEFAULT_MODEL)
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()

    if test_config:
        app.config.update(test_config)

    # Service loggers live under the app logger ("jingledraw.*").
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    app.extensions[RNG_KEY] = _make_rng(app.config["DRAW_SEED"])
    app.extensions[LOCKS_KEY] = GroupLocks()

    @app.errorhandler(SantaError)
    def handle_santa_error(exc: SantaError):
        app.logger.info("%s: %s", exc.kind, exc.message)
        return jsonify(exc.to_dict()), exc.status

    # Blueprints
    app.register_blueprint(public_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(groups_bp)

    with app.app_context():
        db.create_all()

    return app
