"""Command-line entry point for a single KMS sync run.

Startup: load settings (fail fast on missing variables), configure JSON
logging. Run: execute the sync pipeline once under ``asyncio.run``.
Exit: 0 on a successful publish, otherwise the failing error's exit code.
"""

from __future__ import annotations

import asyncio
import json
import logging

from pydantic import ValidationError

from kms_sync.config.settings import SyncSettings
from kms_sync.errors import ConfigurationError, KmsSyncError
from kms_sync.logging_config import configure_logging
from kms_sync.models.report import SyncReport
from kms_sync.services.sync_pipeline import SyncPipeline

logger = logging.getLogger(__name__)


def load_settings() -> SyncSettings:
    """Load ``SyncSettings`` from the environment.

    Raises
    ------
    ConfigurationError
        Listing the offending variables. Input values are left out so a
        malformed token never reaches the log.
    """
    try:
        return SyncSettings()  # type: ignore[call-arg]
    except ValidationError as exc:
        problems = [
            f"{'.'.join(str(loc) for loc in err['loc']).upper()}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems),
            fields=problems,
        ) from None


async def run(settings: SyncSettings) -> SyncReport:
    """Build the pipeline from *settings* and run it once."""
    pipeline = SyncPipeline.from_settings(settings)
    return await pipeline.run()


def main() -> int:
    """Run one sync and return the process exit code."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging()
        logger.error("%s", exc.message)
        return exc.exit_code

    configure_logging(settings.log_level)

    try:
        report = asyncio.run(run(settings))
    except KmsSyncError as exc:
        logger.error(
            "%s",
            exc.message,
            extra={"error_reason": type(exc).__name__},
        )
        return exc.exit_code
    except Exception:
        logger.exception("Unhandled error in main process")
        return 1

    logger.info("KMS sync completed: %s", json.dumps(report.summary()))
    return 0
