"""Analytics configuration management."""

import logging
from functools import lru_cache
from pathlib import Path

from .schemas import AnalyticsConfig
from .utils import load_json

logger = logging.getLogger('netball.config')

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'analytics_config.json'


@lru_cache(maxsize=1)
def get_config() -> AnalyticsConfig:
    """
    Load analytics configuration from data/analytics_config.json.

    The result is cached after the first load. A missing file yields the
    schema defaults; an invalid file raises.

    Returns:
        AnalyticsConfig object with validated settings

    Raises:
        ValueError: If the config file has an invalid structure

    Example:
        from netball.config import get_config
        print(get_config().cache_ttl_seconds)
    """
    if not CONFIG_PATH.exists():
        logger.info(f'No config at {CONFIG_PATH}, using defaults')
        return AnalyticsConfig()
    return load_json(CONFIG_PATH, schema=AnalyticsConfig)


def get_cache_ttl() -> int:
    """Get the query cache TTL in seconds."""
    return get_config().cache_ttl_seconds


def get_recent_form_limit() -> int:
    """Get how many games count as recent form."""
    return get_config().recent_form_limit


def get_reconciliation_strategy() -> str:
    """Get the strategy for resolving mismatched inter-club scores."""
    return get_config().reconciliation_strategy


def get_log_level() -> str:
    return get_config().log_level


def clear_config_cache() -> None:
    """
    Clear the configuration cache so the next call reloads the file.

    Example:
        from netball.config import clear_config_cache, get_config
        clear_config_cache()
        config = get_config()
    """
    get_config.cache_clear()
