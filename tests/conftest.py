"""Fixtures used throughout the tests."""

import pytest
import requests_mock

import ci_webhooks
import ci_webhooks.utils

from . import settings as test_settings
from .fake_github import FakeGitHub


@pytest.fixture
def requests_mocker():
    """No real HTTP: every request has to be mocked."""
    with requests_mock.Mocker(real_http=False, case_sensitive=True) as mocker:
        yield mocker


@pytest.fixture(autouse=True)
def settings_for_tests(mocker):
    """Use tests/settings.py instead of the environment."""
    for name in dir(test_settings):
        if name.isupper():
            mocker.patch(f"ci_webhooks.settings.{name}", getattr(test_settings, name))


@pytest.fixture
def fake_github(mocker, requests_mocker):
    github = FakeGitHub(login="webhook-bot")
    github.install_mocks(requests_mocker)
    mocker.patch("ci_webhooks.utils.retry_sleep", lambda seconds: None)
    return github


@pytest.fixture
def app():
    return ci_webhooks.create_app(config="testing")


@pytest.fixture(autouse=True)
def request_context(app):
    """
    Run every test in an HTTPS request context, for templates and url_for.
    """
    with app.test_request_context("/", base_url="https://ci-webhooks.example.com"):
        yield


@pytest.fixture(autouse=True)
def fresh_memoized_values():
    ci_webhooks.utils.clear_memoized_values()
