"""Service entry point: settings, logging, rule catalog, HTTP server."""

import json
import logging
from pathlib import Path

import uvicorn

from fare_engine.api.app import create_app
from fare_engine.fare_logging import setup_logging
from fare_engine.pricing.collaborators import InMemoryCreditLedger, InMemoryPassengerDirectory
from fare_engine.rules.catalog import RuleCatalog
from fare_engine.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def load_catalog(settings: Settings) -> RuleCatalog:
    """Build the rule catalog, seeding it from FARE_RULES_PATH when set."""
    records: list[dict] = []
    if settings.pricing.rules_path:
        path = Path(settings.pricing.rules_path)
        records = json.loads(path.read_text(encoding="utf-8"))
        logger.info("Loading %d pricing rules from %s", len(records), path)

    return RuleCatalog.from_records(
        records,
        reject_overlapping_rules=settings.pricing.reject_overlapping_rules,
        max_surge_multiplier=settings.pricing.max_surge_multiplier,
    )


def main() -> None:
    settings = get_settings()

    setup_logging(
        level=settings.logging.level,
        json_output=settings.logging.format == "json",
        environment=settings.logging.environment,
    )

    catalog = load_catalog(settings)
    app = create_app(
        catalog,
        passenger_profiles=InMemoryPassengerDirectory(),
        credit_balances=InMemoryCreditLedger(),
        settings=settings,
    )

    logger.info("Starting fare engine on port %d", settings.api.port)
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
