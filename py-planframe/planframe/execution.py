"""
Execution bridge: run a finished plan to completion from synchronous code.

The calling thread hands the plan to a worker and waits on a single future.
The engine fans the work out over its own thread pool; the worker only parks
on it. The caller must not hold a lock those threads need.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, TypeVar

import pyarrow as pa

from .engine.base import Engine
from .plan import LogicalPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExecutionBridge:
    """
    Blocks the caller until the engine has materialized a plan's result.

    There is no timeout and no cancellation. Results are all-or-nothing: the
    full list of batches, or the engine's exception re-raised unchanged.

    Example:
        >>> with ExecutionBridge(engine) as bridge:
        ...     batches = bridge.collect(plan)
    """

    def __init__(self, engine: Engine, max_workers: int = 4):
        self.engine = engine
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="planframe-exec"
        )

    def collect(self, plan: LogicalPlan) -> List[pa.RecordBatch]:
        """Execute ``plan`` and return every record batch it produces."""
        return self._run("collect", self.engine.execute, plan)

    def explain(
        self, plan: LogicalPlan, verbose: bool = False, analyze: bool = False
    ) -> List[pa.RecordBatch]:
        """Run the engine's explain for ``plan`` and return its batches."""
        return self._run("explain", self.engine.explain, plan, verbose, analyze)

    def _run(self, what: str, fn: Callable[..., T], *args) -> T:
        start = time.perf_counter()
        logger.debug("%s submitted", what)
        future = self._executor.submit(fn, *args)
        try:
            result = future.result()
        except BaseException:
            logger.debug(
                "%s failed after %.1f ms", what, (time.perf_counter() - start) * 1000
            )
            raise
        logger.debug(
            "%s finished in %.1f ms (%d batches)",
            what,
            (time.perf_counter() - start) * 1000,
            len(result),
        )
        return result

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker threads. Later calls to collect() raise RuntimeError."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "ExecutionBridge":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()
