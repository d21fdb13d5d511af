from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple

from ..core.constants import DEFAULT_BATCH_WORKERS
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

BatchTask = Tuple[str, Callable[[], object]]


@dataclass
class CascadeReport:
    """Outcome of a best-effort batch: labels of completed and failed operations."""

    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "CascadeReport") -> "CascadeReport":
        self.succeeded.extend(other.succeeded)
        self.failed.extend(other.failed)
        return self

    def as_dict(self) -> dict:
        return {
            "succeeded": list(self.succeeded),
            "failed": [{"target": label, "error": error} for label, error in self.failed],
        }


def run_batch(tasks: Sequence[BatchTask], *, max_workers: int = DEFAULT_BATCH_WORKERS) -> CascadeReport:
    """Run independent operations concurrently; collect, never roll back.

    Only domain failures (API, validation) are collected; programming errors
    propagate.
    """
    report = CascadeReport()
    if not tasks:
        return report

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(tasks))), thread_name_prefix="batch") as pool:
        futures = {pool.submit(fn): label for label, fn in tasks}
        for future in as_completed(futures):
            label = futures[future]
            try:
                future.result()
            except DomainError as e:
                logger.warning("Batch operation %s failed: %s", label, e)
                report.failed.append((label, str(e)))
            else:
                report.succeeded.append(label)
    return report
