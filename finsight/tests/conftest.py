import asyncio
import inspect
from typing import List, Optional

import pytest
from flask.testing import FlaskClient

from finsight.app import create_app
from finsight.config import Settings
from finsight.domain.profiles import JsonFileProfileRepository
from finsight.services.insights import InsightService


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Optional[bool]:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        params = inspect.signature(test_function).parameters
        kwargs = {name: value for name, value in pyfuncitem.funcargs.items() if name in params}
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**kwargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


class StubResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class StubModel:
    """Stands in for genai.GenerativeModel; replies with canned JSON."""

    def __init__(self, replies: Optional[List[object]] = None) -> None:
        self.replies = list(replies or [])
        self.prompts: List[str] = []

    async def generate_content_async(self, prompt, generation_config=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return StubResponse(reply)


async def no_sleep(delay: float) -> None:
    return None


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        profile_store_path=str(tmp_path / "state.json"),
        gemini_api_key=None,
        insight_timeout_seconds=1.0,
        insight_max_retries=3,
        insight_backoff_base_seconds=0.0,
        insight_backoff_jitter_seconds=0.0,
    )


@pytest.fixture()
def repository(settings) -> JsonFileProfileRepository:
    return JsonFileProfileRepository(settings.profile_store_path)


@pytest.fixture()
def stub_model() -> StubModel:
    return StubModel()


@pytest.fixture()
def app(settings, repository, stub_model):
    service = InsightService(settings, model=stub_model, sleep=no_sleep)
    return create_app(settings, repository=repository, insight_service=service)


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
