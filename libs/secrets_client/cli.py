"""
Command-line check that a secret can be retrieved.

Loads a properties file, builds the configured provider and fetches one
secret. Only the secret's length is printed, never the value.

Usage:
    python -m libs.secrets_client vault.properties integration/systemA password
    secrets-client --log-level DEBUG

Exit codes:
    0 - secret retrieved
    1 - secret not found
    2 - configuration, authentication or backend failure
"""

import argparse
import logging
import os
import sys

from libs.common.logging import configure_logging
from libs.secrets_client.client import SecretCapability
from libs.secrets_client.config import load_properties
from libs.secrets_client.exceptions import SecretError, SecretNotFoundError
from libs.secrets_client.factory import create_secrets_client

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "secrets.properties"
DEFAULT_SECRET_PATH = "myapp/config"
DEFAULT_SECRET_KEY = "password"

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secrets-client",
        description="Fetch a static secret through the configured provider and report its length",
    )
    parser.add_argument(
        "config_file",
        nargs="?",
        default=os.getenv("SECRETS_CONFIG_FILE", DEFAULT_CONFIG_FILE),
        help="Properties file (default: $SECRETS_CONFIG_FILE or secrets.properties)",
    )
    parser.add_argument("path", nargs="?", default=DEFAULT_SECRET_PATH, help="Secret path")
    parser.add_argument("key", nargs="?", default=DEFAULT_SECRET_KEY, help="Field name at the path")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(service_name="secrets_client", log_level=args.log_level)

    try:
        config = load_properties(args.config_file)
        with create_secrets_client(config, required={SecretCapability.KV_READ}) as secrets:
            value = secrets.get_required(args.path, args.key)
    except SecretNotFoundError as e:
        logger.error("Secret not found", extra={"secret_path": args.path, "secret_key": args.key})
        print(f"Secret not found: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except SecretError as e:
        logger.error(
            "Secret retrieval failed",
            extra={"secret_path": args.path, "secret_key": args.key, "error_type": type(e).__name__},
        )
        print(f"Secret retrieval failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"Secret retrieved for {args.path}.{args.key} (length={len(value)})")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
