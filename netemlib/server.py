"""HTTP front end: ``POST /api`` with a netem request body.

Example of bodies::

    {"type": "set", "interface": "eth0",
     "controls": {"limit": {"packets": 100}, "delay": {"time": 100}}}

    {"type": "reset", "interface": "eth0"}

The response is the execution output, ``{"status": "ok"}`` or
``{"status": "error", "description": "..."}``.
"""
import asyncio
import logging
from typing import Optional

import jsonschema
from flask import Flask, jsonify, request

from netemlib.config import get_config
from netemlib.constants import API_ROUTE
from netemlib.netem.command import OutputError, execute, netem_from_dictionary

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    app = Flask(__name__)

    @app.route(API_ROUTE, methods=["POST"])
    def api():
        body = request.get_json(silent=True)
        if body is None:
            return jsonify(OutputError("Expected a JSON body").to_dict()), 400
        try:
            netem = netem_from_dictionary(body)
        except jsonschema.exceptions.ValidationError as err:
            logger.info("Rejecting %s: %s", body, err.message)
            return jsonify(OutputError(err.message).to_dict()), 422
        output = asyncio.run(execute(netem))
        return jsonify(output.to_dict())

    @app.errorhandler(404)
    def fallback(_):
        return f"No route for {request.path}", 404

    return app


def serve(host: Optional[str] = None, port: Optional[int] = None):
    """Run the api until interrupted."""
    config = get_config()
    host = host if host is not None else config["api_host"]
    port = port if port is not None else config["api_port"]
    logger.info("listening on %s:%s", host, port)
    create_app().run(host=host, port=port)
