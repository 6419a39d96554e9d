"""
Campaign Stats Relay: web app entrypoint.
Azure Functions custom handler; the host triggers /api/<operation> on a timer, health check at /api/health_check.
Fetches the latest Mailchimp campaign report and posts it to a Basecamp chatbot.
"""

import logging
import sys
from pathlib import Path

# Ensure project root on path
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from flask import Flask, jsonify

from navigation import router
from tools.config import load_config
from tools.errors import ConfigError, UNKNOWN_OPERATION

CONFIG_KEY = "RELAY_CONFIG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = Flask(__name__)


def status_for(result) -> int:
    if result.success:
        return 200
    if result.kind == UNKNOWN_OPERATION:
        return 404
    return 500


@app.route("/api/health_check", methods=["GET"])
def health_check():
    """Liveness: the host polls this before sending invocations. No side effects."""
    return "OK", 200


@app.route("/api/<operation>", methods=["GET", "POST"])
def invoke(operation):
    """Host invocation. Any request body is ignored."""
    result = router.invoke(operation, app.config[CONFIG_KEY])
    return jsonify(result.to_json()), status_for(result)


@app.errorhandler(404)
def not_found(_e):
    return jsonify({"success": False, "error": "receive: NotFound"}), 404


@app.errorhandler(405)
def method_not_allowed(e):
    allow = ", ".join(sorted(e.valid_methods or []))
    return jsonify({"success": False, "error": "receive: MethodNotAllowed"}), 405, {"Allow": allow}


@app.errorhandler(500)
def internal_error(_e):
    # Flask has already logged the traceback; the host only gets the JSON body.
    return jsonify({"success": False, "error": "server: InternalError"}), 500


def main() -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    try:
        config = load_config()
    except ConfigError as e:
        logging.error("Refusing to start: %s", e.cause())
        return 1
    if not config.production:
        logging.getLogger().setLevel(logging.DEBUG)
    app.config[CONFIG_KEY] = config
    logging.info("Listening on port %d (production=%s)", config.port, config.production)
    app.run(host="127.0.0.1", port=config.port, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
