"""Ordered fallback runner shared by the navigator and extractors."""
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Strategy = tuple[str, Callable[[], Awaitable[Any]]]


async def run_strategies(
    strategies: list[Strategy],
    accept: Callable[[Any], bool],
    label: str = "",
) -> tuple[Optional[str], Any]:
    """Try each strategy in order until one returns an accepted result.

    Returns (strategy name, result), or (None, None) when every strategy
    raised or was rejected. Exceptions from a strategy never propagate.
    """
    for name, attempt in strategies:
        try:
            result = await attempt()
        except Exception as e:
            logger.warning(f"{label} strategy '{name}' failed: {e}")
            continue
        if accept(result):
            logger.info(f"{label} strategy '{name}' succeeded")
            return name, result
        logger.info(f"{label} strategy '{name}' produced no usable result")
    logger.warning(f"{label}: all strategies exhausted")
    return None, None
