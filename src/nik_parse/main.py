"""
NIK-PARSE Server Entry Point

Run with: python -m nik_parse.main
Or: uvicorn nik_parse.main:app --reload
"""

import os
import sys
from typing import Any

import uvicorn
import yaml

from nik_parse import __version__
from nik_parse.config.region_loader import get_region_path, load_regions_from_yaml
from nik_parse.logging.setup import setup_logging, get_logger

# Initialize logging early
setup_logging()
logger = get_logger(__name__)

# Import app after logging is set up
from nik_parse.api.routes import app  # noqa: E402

APP_PATH = "nik_parse.api.routes:app"


def validate_environment() -> list[str]:
    """Validate environment variables at startup.

    Returns:
        List of validation error messages (empty if all valid).
    """
    errors = []

    port_str = os.getenv("NIK_PARSE_PORT", "8000")
    try:
        port = int(port_str)
        if not (1 <= port <= 65535):
            errors.append(f"NIK_PARSE_PORT must be between 1 and 65535, got: {port}")
    except ValueError:
        errors.append(f"NIK_PARSE_PORT must be an integer, got: {port_str}")

    valid_log_levels = {"debug", "info", "warning", "error", "critical"}
    log_level = os.getenv("NIK_PARSE_LOG_LEVEL", "info").lower()
    if log_level not in valid_log_levels:
        errors.append(f"NIK_PARSE_LOG_LEVEL must be one of {valid_log_levels}, got: {log_level}")

    strict = os.getenv("NIK_PARSE_STRICT_REGION", "true").lower()
    if strict not in {"true", "false"}:
        errors.append(f"NIK_PARSE_STRICT_REGION must be 'true' or 'false', got: {strict}")

    recent_str = os.getenv("NIK_PARSE_RECENT_VISITORS", "10")
    try:
        if int(recent_str) < 0:
            errors.append(f"NIK_PARSE_RECENT_VISITORS must not be negative, got: {recent_str}")
    except ValueError:
        errors.append(f"NIK_PARSE_RECENT_VISITORS must be an integer, got: {recent_str}")

    region_path = get_region_path()
    try:
        regions = load_regions_from_yaml(region_path)
        if len(regions) == 0:
            logger.warning(
                "Region table is empty; every NIK will be rejected",
                extra={"event": "config_warning", "path": str(region_path)},
            )
    except FileNotFoundError as e:
        errors.append(str(e))
    except (ValueError, yaml.YAMLError) as e:
        errors.append(f"Invalid region table {region_path}: {e}")

    return errors


def server_options() -> dict[str, Any]:
    """Keyword arguments for uvicorn, read from the environment.

    uvicorn's access log is switched off: it prints the raw query string,
    which carries the NIK on GET requests. With ``log_config=None`` the
    server's own records go through the redacting root handler.
    """
    return {
        "host": os.getenv("NIK_PARSE_HOST", "0.0.0.0"),
        "port": int(os.getenv("NIK_PARSE_PORT", "8000")),
        "reload": os.getenv("NIK_PARSE_RELOAD", "false").lower() == "true",
        "log_level": os.getenv("NIK_PARSE_LOG_LEVEL", "info").lower(),
        "access_log": False,
        "log_config": None,
    }


def main():
    """Run the NIK-PARSE server."""
    validation_errors = validate_environment()
    if validation_errors:
        for error in validation_errors:
            logger.error(error, extra={"event": "config_error"})
        print("\nConfiguration errors detected:", file=sys.stderr)
        for error in validation_errors:
            print(f"  - {error}", file=sys.stderr)
        print("\nPlease fix the above errors and restart.", file=sys.stderr)
        sys.exit(1)

    options = server_options()
    host, port = options["host"], options["port"]

    print(f"""
NIK-PARSE v{__version__}
  Form:     http://{host}:{port}/
  API:      http://{host}:{port}/api/nik/parse?nik=<16 digits>
  API Docs: http://{host}:{port}/docs
  Metrics:  http://{host}:{port}/metrics
""")

    logger.info(
        "Starting NIK-PARSE server",
        extra={
            "event": "server_starting",
            "host": host,
            "port": port,
            "version": __version__,
        },
    )

    uvicorn.run(APP_PATH, **options)


if __name__ == "__main__":
    main()
