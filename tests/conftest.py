import json

import pytest
import requests

from ohmytasks.cache import TaskCache
from ohmytasks.storage import InMemoryStorage
from ohmytasks.tasks_client import TasksClient
from ohmytasks.upstream import UpstreamClient

ENDPOINT = "https://tasks.example.com/api/tasks"


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body
        self.text = body if isinstance(body, str) else json.dumps(body) if body is not None else ""
        self.content = self.text.encode()
        self.reason = "OK" if status_code < 400 else "Error"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """
    Records every request and answers from a queue of canned responses
    keyed by HTTP method.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.error = None

    def reply(self, method, status_code=200, body=None):
        self.responses.setdefault(method, []).append(FakeResponse(status_code, body))

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        queue = self.responses.get(method) or []
        if len(queue) > 1:
            return queue.pop(0)
        if queue:
            return queue[0]
        return FakeResponse(200, {"success": True})

    def count(self, method):
        return sum(1 for c in self.calls if c["method"] == method)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def tasks_client(session):
    upstream = UpstreamClient(ENDPOINT, api_key="secret", session=session)
    return TasksClient(upstream, TaskCache(InMemoryStorage()))


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
