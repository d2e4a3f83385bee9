#!/usr/bin/env python3
# src/main.py
"""Hue token relay.
Walks a user through the provider's OAuth2 authorization-code flow, shows the issued tokens
and refreshes expired ones on request. Nothing about the tokens is stored.
"""

import logging
import argparse
from config import ConfigError, load_config
from app import create_app

LOG = logging.getLogger(__name__)


class BooleanAction(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        if values.lower() in ("yes", "true", "t", "1"):
            setattr(namespace, self.dest, True)
        elif values.lower() in ("no", "false", "f", "0"):
            setattr(namespace, self.dest, False)
        else:
            raise argparse.ArgumentTypeError(f"Unsupported boolean value: {values}")


# -------------------- CLI --------------------
def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--host", default="localhost", help="Interface to bind.")
    p.add_argument("--port", type=int, default=5000, help="Port to listen on.")
    p.add_argument("--debug", dest="debug", action=BooleanAction,
                   type=str, default=False,
                   choices=["yes", "no", "true", "false", "t", "f", "1", "0"],
                   help="Toggle the Flask debugger.")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Root logger level.")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = load_config()
    except ConfigError as e:
        raise SystemExit(str(e))

    LOG.info("Using authorize endpoint %s, redirect URI %s", config.authorize_url, config.redirect_uri)
    app = create_app(config)
    app.run(args.host, args.port, debug=args.debug)


if __name__ == "__main__":
    main()
