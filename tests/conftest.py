import json

import pytest
import requests

from components import calculators
from components.api_client import TaxApiClient

BASE_URL = "http://tax-service.test"


class FakeSession:
    """Stands in for requests.Session, recording every POST"""

    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_payload(self):
        return self.calls[-1]["json"]


def build_response(status=200, body=None, reason="OK", text=None):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    if text is not None:
        response._content = text.encode("utf-8")
    elif body is not None:
        response._content = json.dumps(body).encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def api_client(fake_session):
    return TaxApiClient(base_url=BASE_URL, session=fake_session)


@pytest.fixture
def service(monkeypatch, fake_session, api_client):
    """Route calculator handlers through a fake session; returns the session"""
    monkeypatch.setattr(calculators, "tax_api", api_client)
    return fake_session
