"""Service entry point: HTTP API plus the missed-opportunity scheduler.

Usage:
    bid-management            # serve the API
    bid-management --sweep    # run the missed-opportunity sweep once and exit
"""

import logging
import sys

import uvicorn
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .api import create_app
from .config import Config, load_config
from .services import sweep_missed_opportunities

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def run_sweep(services) -> None:
    """Scheduler job wrapper. Failures are logged and retried on the next tick."""
    try:
        sweep_missed_opportunities(services.store, services.activity)
    except Exception as e:
        logger.error(f"Missed-opportunity sweep failed: {e}")


def build_scheduler(config: Config, services) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_sweep,
        args=[services],
        trigger=IntervalTrigger(minutes=config.missed_opportunity_interval_minutes),
        id="missed_opportunities",
        name="Mark expired unassigned tenders as missed",
        replace_existing=True,
        max_instances=1,
    )
    return scheduler


def main() -> None:
    config = load_config()
    logging.getLogger().setLevel(config.log_level)

    app = create_app(config)
    services = app.state.services

    if config.admin_username and config.admin_password:
        services.users.ensure_admin(config.admin_username, config.admin_password, config.admin_email)

    if len(sys.argv) > 1 and sys.argv[1] == "--sweep":
        run_sweep(services)
        return

    scheduler = None
    if config.missed_opportunity_interval_minutes > 0:
        scheduler = build_scheduler(config, services)
        scheduler.start()
        logger.info(f"Missed-opportunity sweep every {config.missed_opportunity_interval_minutes} minutes")

    logger.info(f"Starting Bid Management API on {config.host}:{config.port} (storage={config.storage_backend})")
    try:
        uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
    finally:
        if scheduler is not None:
            logger.info("Shutting down scheduler...")
            scheduler.shutdown()


if __name__ == "__main__":
    main()
