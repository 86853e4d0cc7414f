import asyncio
import socket

import pytest
from aiohttp import web

from httpbench.core.models import BenchmarkConfig

FAILING_TEST_NUMBER = 3


async def echo(request: web.Request) -> web.Response:
    body = await request.text()
    request.app["seen"].append(
        {
            "method": request.method,
            "path": request.path,
            "query": dict(request.query),
            "headers": dict(request.headers),
            "body": body,
        }
    )
    return web.json_response({"ok": True})


async def status(request: web.Request) -> web.Response:
    code = int(request.match_info["code"])
    return web.Response(status=code, text=f"status {code}")


async def flaky(request: web.Request) -> web.Response:
    """Fails for exactly one test number."""
    if int(request.query["n"]) == FAILING_TEST_NUMBER:
        return web.Response(status=500, text="internal error")
    return web.Response(text="ok")


async def slow(request: web.Request) -> web.Response:
    await asyncio.sleep(float(request.query.get("delay", "1")))
    return web.Response(text="finally")


def make_app() -> web.Application:
    app = web.Application()
    app["seen"] = []
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/status/{code}", status)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/slow", slow)
    return app


@pytest.fixture
async def server(aiohttp_server):
    return await aiohttp_server(make_app())


@pytest.fixture
def base_url(server) -> str:
    return str(server.make_url("")).rstrip("/")


@pytest.fixture
def seen_requests(server):
    return server.app["seen"]


@pytest.fixture
def unused_url() -> str:
    """URL of a local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/"


def make_config(url: str, **kwargs) -> BenchmarkConfig:
    kwargs.setdefault("total_requests", 10)
    kwargs.setdefault("parallel_count", 3)
    kwargs.setdefault("timeout_seconds", 5.0)
    return BenchmarkConfig(url=url, **kwargs)
