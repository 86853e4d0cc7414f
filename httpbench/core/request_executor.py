"""Single request construction and execution."""

import logging
import re
import time
from typing import Optional

import aiohttp
from multidict import CIMultiDict
from yarl import URL

from .failure_sampler import FailureSampler
from .models import BenchmarkConfig, RequestResult
from .substitution import replace_in_mapping, replace_variables

DEFAULT_USER_AGENT = "HTTP-Benchmark-Client/1.0"

_METHOD_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class RequestBuildError(Exception):
    """Raised when a request cannot be constructed from the config."""


def _describe(error: BaseException) -> str:
    # Timeouts and some connector errors stringify to an empty message
    return str(error) or error.__class__.__name__


class RequestExecutor:
    """
    Builds and issues one HTTP request per work item.

    execute() never raises: every failure mode ends up in the returned
    RequestResult, and non-2xx responses and errors are handed to the
    failure sampler.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        session: aiohttp.ClientSession,
        failure_sampler: FailureSampler,
    ):
        self.config = config
        self.session = session
        self.failure_sampler = failure_sampler
        self.timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
        self.logger = logging.getLogger(__name__)

    def build_url(self, test_number: int, thread_number: int) -> URL:
        """Resolve the target URL, merging substituted query parameters."""
        target = replace_variables(self.config.url, test_number, thread_number)

        try:
            url = URL(target)
        except (ValueError, TypeError) as e:
            raise RequestBuildError(f"invalid URL: {e}") from e

        if not url.is_absolute() or url.scheme not in ("http", "https"):
            raise RequestBuildError(f"invalid URL: {target!r} is not an absolute http(s) URL")

        if self.config.parameters:
            params = replace_in_mapping(
                self.config.parameters, test_number, thread_number
            )
            url = url.update_query(params)

        return url

    def build_body(self, test_number: int, thread_number: int) -> Optional[bytes]:
        if not self.config.has_body:
            return None
        return replace_variables(
            self.config.post_data, test_number, thread_number
        ).encode("utf-8")

    def build_headers(self, test_number: int, thread_number: int) -> CIMultiDict:
        """
        Build request headers.

        Sources are applied in order (auth, custom headers, content type,
        user agent) and a later source never overrides a header name an
        earlier one already set.
        """
        headers: CIMultiDict = CIMultiDict()

        if self.config.auth_token:
            token = replace_variables(self.config.auth_token, test_number, thread_number)
            headers["Authorization"] = f"Bearer {token}"

        for key, value in self.config.headers.items():
            headers.setdefault(
                replace_variables(key, test_number, thread_number),
                replace_variables(value, test_number, thread_number),
            )

        if self.config.has_body:
            headers.setdefault("Content-Type", self.config.content_type)

        headers.setdefault("User-Agent", DEFAULT_USER_AGENT)
        return headers

    async def _fail(
        self,
        error: str,
        response_time_ms: float,
        test_number: int,
        thread_number: int,
    ) -> RequestResult:
        await self.failure_sampler.record_failure(0, "", error)
        return RequestResult(
            success=False,
            response_time_ms=response_time_ms,
            status_code=0,
            error=error,
            test_number=test_number,
            thread_number=thread_number,
        )

    async def execute(self, test_number: int, thread_number: int) -> RequestResult:
        """Send the request for one work item and classify the outcome."""
        method = self.config.method
        try:
            if not _METHOD_TOKEN.match(method):
                raise RequestBuildError(f"invalid method {method!r}")
            url = self.build_url(test_number, thread_number)
            body = self.build_body(test_number, thread_number)
            headers = self.build_headers(test_number, thread_number)
        except Exception as e:
            self.logger.debug(f"Request {test_number} not sent: {e}")
            return await self._fail(
                f"request creation failed: {_describe(e)}", 0.0, test_number, thread_number
            )

        start_time = time.perf_counter()
        try:
            async with self.session.request(
                method, url, headers=headers, data=body, timeout=self.timeout
            ) as response:
                response_time_ms = (time.perf_counter() - start_time) * 1000
                status_code = response.status

                try:
                    response_body = await response.text(errors="replace")
                except Exception as e:
                    response_body = f"Error reading response body: {_describe(e)}"

        except Exception as e:
            response_time_ms = (time.perf_counter() - start_time) * 1000
            self.logger.debug(f"Request {test_number} failed: {_describe(e)}")
            return await self._fail(
                f"request failed: {_describe(e)}",
                response_time_ms,
                test_number,
                thread_number,
            )

        success = 200 <= status_code < 300

        if not success:
            self.logger.debug(f"Request {test_number} returned HTTP {status_code}")
            await self.failure_sampler.record_failure(
                status_code, response_body, f"HTTP {status_code} response"
            )

        return RequestResult(
            success=success,
            response_time_ms=response_time_ms,
            status_code=status_code,
            response_body=None if success else response_body,
            test_number=test_number,
            thread_number=thread_number,
        )
