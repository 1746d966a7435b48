"""
Calculator - button and keyboard calculator backed by the server-side engine.
No login required. State lives in the Flask session for the browser session only.
"""

import logging

from flask import Blueprint, current_app, jsonify, render_template, request, session

from app.projects.calculator.core.engine import (
    CalculatorError,
    CalculatorState,
    apply_key,
    clear,
    phase,
)
from app.projects.calculator.core.keys import (
    BUTTON_LAYOUT,
    KEYBOARD_MAP,
    PREVENT_DEFAULT_KEYS,
    normalize_key,
)
from app.utils.logging import log_project_visit

logger = logging.getLogger(__name__)

SESSION_KEY = "calculator_state"

calculator_bp = Blueprint(
    "calculator",
    __name__,
    template_folder="templates",
    url_prefix="/calculator",
)


def _load_state():
    return CalculatorState.from_dict(session.get(SESSION_KEY))


def _save_state(state):
    session[SESSION_KEY] = state.to_dict()


def _state_payload(state):
    return {
        "display": state.display,
        "phase": phase(state).value,
        "pending_operator": state.pending_operator.value if state.pending_operator else None,
    }


@calculator_bp.route("/")
def index():
    """Display the calculator."""
    log_project_visit("calculator", "Calculator")
    state = _load_state()
    return render_template(
        "calculator.html",
        display=state.display,
        button_layout=BUTTON_LAYOUT,
        keyboard_map=KEYBOARD_MAP,
        prevent_default_keys=PREVENT_DEFAULT_KEYS,
        pulse_ms=current_app.config.get("CALCULATOR_PULSE_MS", 300),
    )


@calculator_bp.route("/api/state")
def api_state():
    """Current display. Returns {display, phase, pending_operator}."""
    return jsonify(_state_payload(_load_state()))


@calculator_bp.route("/api/press", methods=["POST"])
def api_press():
    """Apply one key. Returns {display, pulse, phase, pending_operator} or {error}."""
    data = request.get_json(silent=True) or {}
    raw_key = data.get("key")
    token = normalize_key(raw_key)
    if token is None:
        return jsonify({"error": f"Unknown key: {raw_key!r}"}), 400

    state = _load_state()
    try:
        new_state, pulse = apply_key(state, token)
    except CalculatorError as e:
        # State stays as it was; the page shows the message and the user decides
        logger.info("Calculator error on key %r: %s", token, e)
        payload = _state_payload(state)
        payload["error"] = str(e)
        return jsonify(payload), 400

    _save_state(new_state)
    payload = _state_payload(new_state)
    payload["pulse"] = pulse
    return jsonify(payload)


@calculator_bp.route("/api/clear", methods=["POST"])
def api_clear():
    """Reset the calculator. Returns {display, phase, pending_operator}."""
    state = clear()
    _save_state(state)
    return jsonify(_state_payload(state))
