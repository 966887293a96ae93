"""
Infrastructure initialization and bootstrap.

Builds the event log service from configuration. The caller owns
the returned instance (main.py keeps it on app.state).
"""

import logging
from typing import Optional

from eventlog import EventLogService, LocalLogStore

from .config import InfraConfig, get_config

logger = logging.getLogger(__name__)


def bootstrap_event_log(config: Optional[InfraConfig] = None) -> EventLogService:
    """
    Create the event log service.

    Args:
        config: Optional custom configuration (defaults to environment)

    Returns:
        EventLogService, not yet started
    """
    config = config or get_config()
    service = EventLogService(
        store=LocalLogStore(config.log_dir),
        mirror=config.create_mirror(),
        sync_interval_s=config.sync_interval_s,
    )
    logger.info(f"Bootstrapped {service!r}")
    return service
