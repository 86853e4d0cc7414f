import aiohttp
import pytest
from yarl import URL

from httpbench.core.failure_sampler import FailureSampler
from httpbench.core.request_executor import (
    DEFAULT_USER_AGENT,
    RequestBuildError,
    RequestExecutor,
)

from conftest import make_config


@pytest.fixture
async def session():
    async with aiohttp.ClientSession() as session:
        yield session


def offline_executor(**kwargs) -> RequestExecutor:
    """Executor for request-building checks that never sends anything."""
    config = make_config(kwargs.pop("url", "http://example.test/path"), **kwargs)
    return RequestExecutor(config, session=None, failure_sampler=FailureSampler(None))


def test_url_substitution():
    executor = offline_executor(url="http://example.test/items/[test_number]?w=[thread_number]")
    assert executor.build_url(8, 1) == URL("http://example.test/items/8?w=1")


def test_parameters_merge_with_literal_query():
    executor = offline_executor(
        url="http://example.test/search?keep=1&page=old",
        parameters={"page": "[test_number]", "worker-[thread_number]": "yes"},
    )

    url = executor.build_url(5, 2)

    assert url.path == "/search"
    assert dict(url.query) == {"keep": "1", "page": "5", "worker-2": "yes"}


@pytest.mark.parametrize("bad_url", ["not a url", "/relative/path", "ftp://example.test/file"])
def test_unusable_urls_are_rejected(bad_url):
    with pytest.raises(RequestBuildError):
        offline_executor(url=bad_url).build_url(0, 0)


def test_header_precedence():
    executor = offline_executor(
        method="POST",
        post_data='{"n": [test_number]}',
        auth_token="tok-[thread_number]",
        headers={
            "X-Request": "[test_number]",
            "authorization": "ignored",
            "content-type": "text/plain",
        },
    )

    headers = executor.build_headers(3, 1)

    assert headers["Authorization"] == "Bearer tok-1"
    assert headers["X-Request"] == "3"
    assert headers["Content-Type"] == "text/plain"
    assert headers["User-Agent"] == DEFAULT_USER_AGENT


def test_content_type_only_with_a_body():
    with_body = offline_executor(method="PUT", post_data="x", content_type="application/xml")
    without_body = offline_executor(method="GET", post_data="x")

    assert with_body.build_headers(0, 0)["Content-Type"] == "application/xml"
    assert "Content-Type" not in without_body.build_headers(0, 0)
    assert "Authorization" not in without_body.build_headers(0, 0)


def test_custom_user_agent_wins():
    executor = offline_executor(headers={"user-agent": "custom/2.0"})
    assert executor.build_headers(0, 0)["User-Agent"] == "custom/2.0"


def test_body_only_for_body_methods():
    assert offline_executor(method="PATCH", post_data="[test_number]").build_body(4, 0) == b"4"
    assert offline_executor(method="DELETE", post_data="[test_number]").build_body(4, 0) is None
    assert offline_executor(method="POST").build_body(4, 0) is None


async def test_successful_request(session, base_url, seen_requests):
    config = make_config(
        f"{base_url}/echo",
        method="POST",
        post_data='{"test": [test_number], "thread": [thread_number]}',
        parameters={"n": "[test_number]"},
        headers={"X-Thread": "[thread_number]"},
    )
    executor = RequestExecutor(config, session, FailureSampler(None))

    result = await executor.execute(7, 2)

    assert result.success
    assert result.status_code == 200
    assert result.error is None
    assert result.response_body is None
    assert result.response_time_ms > 0
    assert (result.test_number, result.thread_number) == (7, 2)

    sent = seen_requests[0]
    assert sent["method"] == "POST"
    assert sent["query"] == {"n": "7"}
    assert sent["body"] == '{"test": 7, "thread": 2}'
    assert sent["headers"]["X-Thread"] == "2"
    assert sent["headers"]["Content-Type"] == "application/json"
    assert sent["headers"]["User-Agent"] == DEFAULT_USER_AGENT


async def test_get_ignores_post_data(session, base_url, seen_requests):
    config = make_config(f"{base_url}/echo", post_data="should not be sent")
    executor = RequestExecutor(config, session, FailureSampler(None))

    result = await executor.execute(0, 0)

    assert result.success
    assert seen_requests[0]["body"] == ""


async def test_non_2xx_is_a_failure(session, base_url, tmp_path):
    sampler = FailureSampler(str(tmp_path))
    executor = RequestExecutor(make_config(f"{base_url}/status/404"), session, sampler)

    result = await executor.execute(0, 0)

    assert not result.success
    assert result.status_code == 404
    assert result.response_body == "status 404"
    assert result.error is None

    report = next(tmp_path.iterdir())
    assert report.name.endswith("_status_404.txt")
    assert "Error Message: HTTP 404 response" in report.read_text()


@pytest.mark.parametrize("code", [200, 201, 204])
async def test_2xx_is_success(session, base_url, code):
    executor = RequestExecutor(
        make_config(f"{base_url}/status/{code}"), session, FailureSampler(None)
    )
    result = await executor.execute(0, 0)
    assert result.success
    assert result.status_code == code


@pytest.mark.parametrize("code", [400, 404, 500, 503])
async def test_other_statuses_are_failures(session, base_url, code):
    executor = RequestExecutor(
        make_config(f"{base_url}/status/{code}"), session, FailureSampler(None)
    )
    result = await executor.execute(0, 0)
    assert not result.success
    assert result.status_code == code


async def test_connection_refused(session, unused_url, tmp_path):
    sampler = FailureSampler(str(tmp_path))
    executor = RequestExecutor(make_config(unused_url), session, sampler)

    result = await executor.execute(1, 0)

    assert not result.success
    assert result.status_code == 0
    assert result.error.startswith("request failed: ")
    assert result.response_time_ms >= 0
    assert next(tmp_path.iterdir()).name.endswith("_status_0.txt")


async def test_timeout(session, base_url):
    config = make_config(f"{base_url}/slow?delay=2", timeout_seconds=0.2)
    executor = RequestExecutor(config, session, FailureSampler(None))

    result = await executor.execute(0, 0)

    assert not result.success
    assert result.status_code == 0
    assert result.error.startswith("request failed: ")
    assert 150 <= result.response_time_ms < 2000


async def test_construction_failure_is_captured(session, tmp_path):
    sampler = FailureSampler(str(tmp_path))
    executor = RequestExecutor(make_config("not a url"), session, sampler)

    result = await executor.execute(0, 0)

    assert not result.success
    assert result.status_code == 0
    assert result.response_time_ms == 0.0
    assert result.error.startswith("request creation failed: invalid URL")
    assert sampler.failure_count == 1


async def test_invalid_method_is_captured(session, base_url):
    executor = RequestExecutor(
        make_config(f"{base_url}/echo", method="GE T"), session, FailureSampler(None)
    )

    result = await executor.execute(0, 0)

    assert not result.success
    assert result.error.startswith("request creation failed: invalid method")


async def test_unexpected_build_error_is_captured(session, base_url, tmp_path):
    # A config built in code can bypass the loader's type checks
    sampler = FailureSampler(str(tmp_path))
    config = make_config(
        f"{base_url}/echo", method="POST", post_data={"id": "[test_number]"}, auth_token=12345
    )
    executor = RequestExecutor(config, session, sampler)

    result = await executor.execute(0, 0)

    assert not result.success
    assert result.status_code == 0
    assert result.error.startswith("request creation failed: ")
    assert sampler.failure_count == 1
