"""
Flask server for the pocket-calc web UI.

Serves the calculator page and a small JSON API that drives one engine per
browser session.
"""

import logging
import os
import secrets
from typing import Optional

from flask import Flask, current_app, jsonify, render_template, request, session

from ..config import CalculatorConfig
from ..engine import UnknownActionError
from ..keymap import press_key
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

SESSION_KEY = "calc_id"
SECRET_KEY_ENV = "POCKET_CALC_SECRET_KEY"


def create_app(
    config: Optional[CalculatorConfig] = None,
    registry: Optional[SessionRegistry] = None,
    secret_key: Optional[str] = None,
) -> Flask:
    """
    Build the Flask application.

    Args:
        config: Engine configuration (defaults to values from the environment)
        registry: Session registry to use; a new one is created otherwise
        secret_key: Session cookie key (defaults to POCKET_CALC_SECRET_KEY,
            then a random per-process key)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    app.secret_key = secret_key or os.environ.get(SECRET_KEY_ENV) or secrets.token_hex(16)
    if registry is None:
        registry = SessionRegistry(config or CalculatorConfig.from_env())
    app.extensions["pocket_calc"] = registry

    app.add_url_rule("/", view_func=index)
    app.add_url_rule("/api/state", view_func=get_state, methods=["GET"])
    app.add_url_rule("/api/action", view_func=post_action, methods=["POST"])
    app.add_url_rule("/api/key", view_func=post_key, methods=["POST"])
    app.add_url_rule("/api/reset", view_func=reset, methods=["POST"])
    return app


def _registry() -> SessionRegistry:
    return current_app.extensions["pocket_calc"]


def _session_id() -> str:
    session_id = session.get(SESSION_KEY)
    if not session_id:
        session_id = SessionRegistry.new_session_id()
        session[SESSION_KEY] = session_id
    return session_id


def index():
    """Render the calculator page."""
    return render_template("index.html")


def get_state():
    """
    Current display for this session.

    Also used by the page as a poll, so the Error auto-clear and advisory
    reverts show up without a key press.

    Returns:
        {"primary": "...", "trace": "...", "error_active": false,
         "active_operator": null}
    """
    with _registry().use(_session_id()) as engine:
        return jsonify(engine.display.to_dict())


def post_action():
    """
    Apply a button press.

    Expected JSON payload:
        {
            "action": "digit|decimal|add|subtract|multiply|divide|equals|clear|
                       percentage|square-root|memory-clear|memory-recall|
                       memory-add|memory-subtract",
            "value": "7"  // digit only
        }

    Returns:
        JSON display snapshot, or {"error": "..."} with status 400
    """
    data = request.get_json(silent=True)

    if not data or not isinstance(data, dict):
        return jsonify({"error": "No JSON object provided"}), 400

    action = data.get("action")
    if not action or not isinstance(action, str):
        return jsonify({"error": "action is required"}), 400

    with _registry().use(_session_id()) as engine:
        try:
            display = engine.dispatch(action, data.get("value"))
        except UnknownActionError as e:
            logger.warning("Rejected action %r", action)
            return jsonify({"error": str(e)}), 400
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify(display.to_dict())


def post_key():
    """
    Apply a keyboard key (``KeyboardEvent.key``); unmapped keys are ignored.

    Expected JSON payload:
        {"key": "Enter"}
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("key"), str):
        return jsonify({"error": "key is required"}), 400

    with _registry().use(_session_id()) as engine:
        return jsonify(press_key(engine, data["key"]).to_dict())


def reset():
    """Discard this session's calculator, memory included."""
    _registry().drop(_session_id())
    with _registry().use(_session_id()) as engine:
        return jsonify(engine.display.to_dict())
