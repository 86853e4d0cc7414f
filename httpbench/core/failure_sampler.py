"""De-duplicating sink for failing responses."""

import asyncio
import hashlib
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import aiofiles

REPORT_TEMPLATE = """HTTP Benchmark Failure Report
Generated: {generated}
Hash: {signature}

Status Code: {status_code}
Error Message: {error_message}

Response Headers: (captured in request)
Response Body:
{response_body}

----------------------------------------
This is a unique failure response that hasn't been seen before in this benchmark run.
"""


def failure_signature(status_code: int, error_message: str, response_body: str) -> str:
    """Fingerprint a failure by its status, error and body."""
    content = f"Status: {status_code}\nError: {error_message}\nResponse: {response_body}"
    return hashlib.md5(content.encode("utf-8")).hexdigest()


class FailureSampler:
    """
    Writes at most one report file per distinct failure signature.

    A sampler constructed without a directory, or whose directory cannot be
    created, is disabled and every call on it is a no-op.
    """

    def __init__(self, dump_dir: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.dump_dir: Optional[Path] = None
        self.enabled = False
        self.failure_count = 0
        self._seen: Dict[str, bool] = {}
        self._lock = asyncio.Lock()

        if not dump_dir:
            return

        path = Path(dump_dir)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not create dump directory {dump_dir}: {e}")
            return

        self.dump_dir = path
        self.enabled = True

    async def record_failure(
        self, status_code: int, response_body: str, error_message: str
    ) -> None:
        """Persist the failure if its signature has not been seen in this run."""
        if not self.enabled:
            return

        signature = failure_signature(status_code, error_message, response_body)

        async with self._lock:
            if self._seen.get(signature):
                return

            self._seen[signature] = True
            self.failure_count += 1

            now = datetime.now()
            filename = (
                f"failure_{self.failure_count}_{now.strftime('%Y%m%d_%H%M%S')}"
                f"_status_{status_code}.txt"
            )
            report_path = self.dump_dir / filename
            report = REPORT_TEMPLATE.format(
                generated=now.strftime("%Y-%m-%d %H:%M:%S"),
                signature=signature,
                status_code=status_code,
                error_message=error_message,
                response_body=response_body,
            )

            try:
                async with aiofiles.open(report_path, "w", encoding="utf-8") as f:
                    await f.write(report)
            except OSError as e:
                self.logger.warning(
                    f"Could not write failure dump to {report_path}: {e}"
                )
                return

            self.logger.info(f"Saved new failure type to {report_path}")

    def summary(self) -> str:
        """One-line description of what was dumped."""
        return (
            f"Failure dump summary: {self.failure_count} unique failure types "
            f"saved to {self.dump_dir}"
        )
