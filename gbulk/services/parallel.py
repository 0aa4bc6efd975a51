"""
Concurrent per-repository execution for gbulk services.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from ..domain.operation import RepoOutcome

logger = logging.getLogger(__name__)


def describe_error(error: BaseException) -> str:
    """Message for a failed outcome, with a generic fallback."""
    return str(error) or "Unknown error"


def run_per_repo(
    repos: Sequence[str],
    worker: Callable[[str], RepoOutcome],
    max_workers: Optional[int] = None
) -> List[RepoOutcome]:
    """
    Run ``worker`` once per repository on a thread pool.

    Every task is joined before returning. Outcomes come back in the
    order of ``repos`` and an exception escaping a worker becomes a
    failed outcome for that repository only.

    Args:
        repos: Repository paths
        worker: Callable producing the outcome for one path
        max_workers: Pool size (None or 0 = one thread per repository)
    """
    if not repos:
        return []

    def guarded(path: str) -> RepoOutcome:
        try:
            return worker(path)
        except Exception as e:
            logger.debug(f"Unhandled error processing {path}", exc_info=True)
            return RepoOutcome(path=path, success=False, message=describe_error(e))

    with ThreadPoolExecutor(max_workers=max_workers or len(repos)) as executor:
        futures = [executor.submit(guarded, path) for path in repos]
        return [future.result() for future in futures]
