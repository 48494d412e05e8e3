"""Command-line setup entrypoint.

Objective:
    Create the cached OAuth token the library needs, through a one-time
    interactive authorization.

Responsibilities:
    - Parse arguments (credentials file, scopes, token location, verbosity).
    - Configure logging.
    - Invoke :meth:`GmailAuthenticator.setup`.

High-level call tree:
    - :func:`main`
        - :func:`setup_logging`
        - instantiate :class:`GmailAuthenticator`
        - :meth:`GmailAuthenticator.setup`

Operational notes:
    - This module supports being run both as a package module
      (``python -m inboxer.cli``) and as a script
      (``python src/inboxer/cli.py``). The import fallback handles
      the script case.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

try:
    from .auth import GmailAuthenticator
    from .config import (
        GMAIL_MODIFY_SCOPE,
        GMAIL_READONLY_SCOPE,
        MAIL_GOOGLE_COM_SCOPE,
        get_settings,
    )
except ImportError:  # pragma: no cover
    src_root = Path(__file__).resolve().parents[1]
    if str(src_root) not in sys.path:
        sys.path.insert(0, str(src_root))

    from inboxer.auth import GmailAuthenticator
    from inboxer.config import (
        GMAIL_MODIFY_SCOPE,
        GMAIL_READONLY_SCOPE,
        MAIL_GOOGLE_COM_SCOPE,
        get_settings,
    )


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the setup utility.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def main(args: Optional[list[str]] = None) -> int:
    """
    Setup CLI entry point.

    Pass an explicit ``args`` list instead of relying on ``sys.argv`` when
    testing. A missing credentials argument makes argparse print usage and
    exit with status 2.

    Args:
        args: Command line arguments (uses sys.argv if None).

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    parser = argparse.ArgumentParser(
        prog="inboxer-setup",
        description="Authorize Gmail access and cache the OAuth token",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  %(prog)s ~/Downloads/credentials.json
  %(prog)s credentials.json --scope {GMAIL_READONLY_SCOPE}
  %(prog)s credentials.json --scope {GMAIL_MODIFY_SCOPE}
  %(prog)s credentials.json --force        Re-authorize, replacing the cached token
        """,
    )

    parser.add_argument(
        "credentials",
        type=Path,
        help="Path to the OAuth client secrets JSON file",
    )

    parser.add_argument(
        "--scope",
        "-s",
        action="append",
        dest="scopes",
        default=None,
        help=f"OAuth scope to request (repeatable, default: {MAIL_GOOGLE_COM_SCOPE})",
    )

    parser.add_argument(
        "--token-dir",
        type=Path,
        default=None,
        help="Directory for the cached token (overrides INBOXER_TOKEN_DIR)",
    )

    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help="Discard any cached token and authorize again",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    parsed_args = parser.parse_args(args)

    log_level = "DEBUG" if parsed_args.verbose else parsed_args.log_level
    setup_logging(log_level)

    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
        settings.credentials_path = parsed_args.credentials
        if parsed_args.scopes:
            settings.scopes = parsed_args.scopes
        if parsed_args.token_dir:
            settings.token_dir = parsed_args.token_dir

        authenticator = GmailAuthenticator(settings)
        if parsed_args.force:
            authenticator.logout()

        authenticator.setup()
        return 0

    except Exception as e:
        logger.exception("Setup failed")
        print(f"\nError: {e}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
