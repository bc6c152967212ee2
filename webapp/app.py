"""
This module contains the Flask application serving the address search, the
material list and the waste pickup calendars.
"""

import logging

from flask import Flask, current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from affaldsplan.exceptions import (
    ClientInputError,
    UpstreamCommunicationError,
    UpstreamProtocolError,
)

logger = logging.getLogger(__name__)

app = Flask(__name__)


def get_pipeline():
    """Returns the CalendarPipeline bound to the running app."""
    pipeline = current_app.config.get("PIPELINE")
    if pipeline is None:
        raise RuntimeError("No calendar pipeline configured. Use renoweb_ics.app_factory.create_app().")
    return pipeline


@app.route("/")
def index():
    """Renders the landing page with the address search."""
    return render_template("index.html")


@app.route("/addressId")
def address_ids():
    """Returns the Renoweb address matches for ?address=<text>."""
    if "address" not in request.args:
        raise ClientInputError("Missing address search text")
    return jsonify(get_pipeline().search_addresses(request.args["address"]))


@app.route("/materials")
def materials():
    """Returns the materials registered for ?addressId=<id>."""
    if "addressId" not in request.args:
        raise ClientInputError("Missing addressId")
    return jsonify(get_pipeline().get_materials(request.args["addressId"]))


@app.route("/ics")
def ics():
    """Returns the pickup calendar as an ICS attachment or as plain text."""
    rendered = get_pipeline().calendar_response(request.args.to_dict())
    response = current_app.response_class(rendered.body, mimetype=rendered.mimetype)
    if rendered.filename:
        response.headers["Content-Disposition"] = f'attachment; filename="{rendered.filename}"'
    response.last_modified = rendered.last_modified
    return response.make_conditional(request)


@app.after_request
def add_cache_control(response):
    response.headers["Cache-Control"] = "public"
    return response


@app.errorhandler(ClientInputError)
def handle_client_input_error(e):
    return str(e), 400, {"Content-Type": "text/plain; charset=utf-8"}


@app.errorhandler(UpstreamProtocolError)
def handle_upstream_protocol_error(e):
    logger.error(f"Unparseable data from Renoweb: {e}")
    message = f"Noget af det modtagne data fra Renoweb blev ikke parset korrekt. Fejlen var: {e}"
    return message, 500, {"Content-Type": "text/plain; charset=utf-8"}


@app.errorhandler(UpstreamCommunicationError)
def handle_upstream_communication_error(e):
    message = f"Der skete en fejl under kommunikationen med Renoweb: {e}"
    return message, 500, {"Content-Type": "text/plain; charset=utf-8"}


@app.errorhandler(Exception)
def handle_unknown_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.exception(f"Unexpected error while handling {request.path}: {e}")
    return f"Der skete en ukendt fejl: {e}", 500, {"Content-Type": "text/plain; charset=utf-8"}
