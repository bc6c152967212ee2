"""
This script runs the Flask calendar server.
"""

from affaldsplan.config import SERVER_HOST, SERVER_PORT
from renoweb_ics.app_factory import create_app, initialize_app

if __name__ == "__main__":
    initialize_app()
    # Running on 0.0.0.0 makes it accessible from outside the container
    create_app().run(host=SERVER_HOST, port=SERVER_PORT)
