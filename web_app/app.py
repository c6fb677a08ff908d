#!/usr/bin/env python3
"""
HTTP API for the natural deduction checker
- POST /api/parse: formula text -> formula AST (JSON)
- POST /api/apply-rule: proof state + rule invocation -> new proof state
- POST /api/verify: replay a scripted proof via `run_session`
- Cross-origin access for the browser front end (allow-list + deploy suffix)
The proof state lives on the client; every request carries it in full.
"""
from flask import Flask, request, jsonify
import os

from proof_checker import (
    CheckError,
    WireFormatError,
    apply_rule,
    formula_from_json,
    formula_to_json,
    goal_reached,
    parse_formula,
    run_session,
    state_from_json,
    state_to_json,
    suggest_on_failure,
)

DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "https://natural-deduction-react.vercel.app",
]


def load_config(environ=None):
    """Read server settings from ND_* environment variables."""
    env = os.environ if environ is None else environ
    origins = env.get("ND_ALLOWED_ORIGINS")
    return {
        "ND_HOST": env.get("ND_HOST", "127.0.0.1"),
        "ND_PORT": int(env.get("ND_PORT", "3000")),
        "ND_DEBUG": env.get("ND_DEBUG", "").lower() in ("1", "true", "yes"),
        "ND_ALLOWED_ORIGINS": [o.strip() for o in origins.split(",") if o.strip()] if origins is not None else list(DEFAULT_ORIGINS),
        "ND_ALLOWED_ORIGIN_SUFFIX": env.get("ND_ALLOWED_ORIGIN_SUFFIX", ".vercel.app"),
    }


app = Flask(__name__)
app.config.update(load_config())

# Cross-origin policy

def origin_allowed(origin: str) -> bool:
    if origin in app.config["ND_ALLOWED_ORIGINS"]:
        return True
    suffix = app.config["ND_ALLOWED_ORIGIN_SUFFIX"]
    return bool(suffix) and origin.endswith(suffix)


@app.before_request
def answer_preflight():
    if request.method == "OPTIONS":
        return "", 204


@app.after_request
def add_cors_headers(response):
    origin = request.headers.get("Origin")
    # no Origin: same-origin or non-browser client, nothing to add
    if not origin:
        return response
    if origin_allowed(origin):
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        response.headers["Vary"] = "Origin"
    else:
        app.logger.warning("Blocked cross-origin request from %s", origin)
    return response

# Helpers

def error_response(err: CheckError, status: int = 400):
    return jsonify({
        "success": False,
        "message": str(err),
        "kind": str(err.kind),
        "suggestion": suggest_on_failure(err),
    }), status


def json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise WireFormatError("Request body must be a JSON object.")
    return data

# Routes

@app.route("/api/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "message": f"Backend is running on port {app.config['ND_PORT']}"})


@app.route("/api/parse", methods=["POST"])
def parse_endpoint():
    try:
        data = json_body()
        text = data.get("formulaString")
        if not isinstance(text, str) or not text.strip():
            return jsonify({"success": False, "message": "No formula was entered."}), 400
        formula = parse_formula(text)
        # deep formulas can still exceed the recursion limit while encoding
        return jsonify({"success": True, "formulaAst": formula_to_json(formula), "text": str(formula)})
    except CheckError as e:
        app.logger.warning("Parsing error: %s", e)
        return error_response(e)
    except Exception:
        app.logger.exception("Unexpected error while parsing a formula")
        return jsonify({"success": False, "message": "An unknown server error occurred."}), 500


@app.route("/api/apply-rule", methods=["POST"])
def apply_rule_endpoint():
    try:
        data = json_body()
        state = state_from_json(data.get("state"))
        ids = data.get("selectedStepIds")
        if not isinstance(ids, list):
            raise WireFormatError("'selectedStepIds' must be a list of step ids.")
        secondary = data.get("newFormulaAst")
        new_state = apply_rule(
            state,
            data.get("rule", ""),
            ids,
            formula_from_json(secondary) if secondary is not None else None,
        )
    except CheckError as e:
        app.logger.warning("Rule application error: %s", e)
        return error_response(e)
    except Exception:
        app.logger.exception("Unexpected error while applying a rule")
        return jsonify({"success": False, "message": "An unknown server error occurred."}), 500
    return jsonify({
        "success": True,
        "newState": state_to_json(new_state),
        "goalReached": goal_reached(new_state),
    })


@app.route("/api/verify", methods=["POST"])
def verify_endpoint():
    try:
        out = run_session(json_body())
    except CheckError as e:
        app.logger.warning("Session error: %s", e)
        return error_response(e)
    except Exception:
        app.logger.exception("Unexpected error while replaying a session")
        return jsonify({"success": False, "message": "An unknown server error occurred."}), 500
    return jsonify(out)


if __name__ == "__main__":
    app.logger.info("Backend server running at http://%s:%s", app.config["ND_HOST"], app.config["ND_PORT"])
    app.run(host=app.config["ND_HOST"], port=app.config["ND_PORT"], debug=app.config["ND_DEBUG"])
