"""
Bounded fan-out for per-file remote reads.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def fan_out(func: Callable[[T], R], items: Iterable[T], max_workers: int = 8) -> List[R]:
    """
    Apply ``func`` to every item on a bounded thread pool.

    Results follow the order of ``items``, not completion order. The first
    exception in input order is re-raised after the pool has drained.

    Args:
        func: Callable run once per item
        items: Work items
        max_workers: Upper bound on concurrent calls

    Returns:
        One result per item, in input order
    """
    items = list(items)
    if not items:
        return []
    if max_workers <= 0:
        raise ValueError("max_workers must be positive")

    workers = min(max_workers, len(items))
    logger.debug(f"Fanning out {len(items)} tasks over {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(func, items))
