import argparse
import logging
import sys
from typing import Optional

from affaldsplan.config import SERVER_HOST, SERVER_PORT
from affaldsplan.exceptions import RenowebIcsError

from .app_factory import create_app, create_pipeline, initialize_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Renoweb waste pickup calendar service.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the calendar web server.")
    serve.add_argument("--host", default=SERVER_HOST)
    serve.add_argument("--port", type=int, default=SERVER_PORT)

    build = subparsers.add_parser("build", help="Generate the calendar for one address.")
    build.add_argument("--address-id", required=True)
    build.add_argument("--format", choices=["ics", "text"], default="ics")
    build.add_argument("--output", help="File to write to. Defaults to stdout.")
    return parser


def build_calendar(address_id: str, fmt: str, output: Optional[str] = None) -> int:
    pipeline = create_pipeline()
    try:
        rendered = pipeline.calendar_response({"addressId": address_id, "format": fmt})
    except RenowebIcsError as e:
        logger.error(f"Could not build calendar for address {address_id}: {e}")
        return 1

    if output:
        with open(output, "wb") as f:
            f.write(rendered.body)
        logger.info(f"Calendar for address {address_id} written to {output}.")
    else:
        sys.stdout.buffer.write(rendered.body)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    initialize_app()

    if args.command == "serve":
        logger.info(f"Starting server on {args.host}:{args.port}...")
        create_app().run(host=args.host, port=args.port)
        return 0
    return build_calendar(args.address_id, args.format, args.output)


if __name__ == "__main__":
    sys.exit(main())
