"""
secretsweep CLI — starts the interactive UI.

Usage:
    secretsweep             # scan AWS Secrets Manager and open the UI
    secretsweep --version   # show version

Configuration comes from SECRETSWEEP_* environment variables (see
secretsweep.config); AWS credentials resolve through the usual boto3 chain.
"""

from __future__ import annotations

import argparse
import logging
import sys

from secretsweep.config import Config, get_config

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="secretsweep",
        description="Find and delete stale secrets in AWS Secrets Manager.",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    args = parser.parse_args(argv)

    if args.version:
        from secretsweep import __version__

        print(f"secretsweep {__version__}")
        return 0

    try:
        config = get_config()
    except ValueError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    _configure_logging(config)
    return _run(config)


def _configure_logging(config: Config) -> None:
    """Log to a file; the terminal belongs to the UI."""
    config.log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        filename=config.log_file,
    )
    # botocore is chatty at DEBUG and would log request signing details
    logging.getLogger("botocore").setLevel(logging.WARNING)


def _run(config: Config) -> int:
    from secretsweep.source import SecretsManagerSource, SourceUnavailable
    from secretsweep.tui.app import SecretSweepApp

    logger.info("Starting secretsweep...")
    source = None
    init_error = None
    try:
        source = SecretsManagerSource.from_config(config)
    except SourceUnavailable as e:
        logger.error("Secret source unavailable: %s", e)
        init_error = str(e)

    app = SecretSweepApp(source, config, init_error=init_error)
    app.run()
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
