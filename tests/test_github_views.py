"""Tests of the webhook receiver in github_views.py."""

import base64
import hashlib
import hmac
import json

import pytest

from ci_webhooks.tasks.github import pull_request_labeled_task, slash_command_task

BASE_URL = "https://ci-webhooks.example.com"
SECRET = "testing-webhooks-secret"


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def queue_task(mocker):
    return mocker.patch("ci_webhooks.github_views.queue_task", return_value=("queued", 202))


def post_event(client, event, secret=SECRET, event_type="pull_request"):
    payload = json.dumps(event).encode()
    headers = {"X-GitHub-Event": event_type}
    if secret:
        mac = hmac.new(secret.encode(), msg=payload, digestmod=hashlib.sha256)
        headers["X-Hub-Signature-256"] = "sha256=" + mac.hexdigest()
    return client.post(
        "/github/hook-receiver",
        data=payload,
        headers=headers,
        content_type="application/json",
        base_url=BASE_URL,
    )


@pytest.mark.parametrize("secret", [None, "not-the-secret"])
def test_bad_signature(client, queue_task, fake_github, secret):
    pr = fake_github.make_pull_request()
    resp = post_event(client, fake_github.label_event(pr, "labeled", "e2e/run"), secret=secret)
    assert resp.status_code == 403
    assert resp.get_data(as_text=True) == "Rejecting because signature doesn't match!"
    assert not queue_task.called


@pytest.mark.parametrize("action", ["labeled", "unlabeled"])
def test_label_event_is_queued(client, queue_task, fake_github, action):
    pr = fake_github.make_pull_request()
    event = fake_github.label_event(pr, action, "e2e/run")
    resp = post_event(client, event)
    assert resp.status_code == 202
    queue_task.assert_called_once_with(pull_request_labeled_task, event, f"refs/pull/{pr.number}/head")


@pytest.mark.parametrize("action", ["opened", "synchronize", "closed"])
def test_other_pull_request_actions(client, queue_task, fake_github, action):
    pr = fake_github.make_pull_request()
    event = {
        "action": action,
        "number": pr.number,
        "pull_request": pr.as_json(),
        "repository": pr.repo.as_json(),
        "sender": {"login": "nedbat"},
    }
    resp = post_event(client, event)
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "Nothing for me to do"
    assert not queue_task.called


def test_comment_is_queued(client, queue_task, fake_github):
    pr = fake_github.make_pull_request()
    event = fake_github.comment_event(pr, "/e2e-run", user="nedbat")
    resp = post_event(client, event, event_type="issue_comment")
    assert resp.status_code == 202
    queue_task.assert_called_once_with(slash_command_task, event)


def test_bot_comment_is_ignored(client, queue_task, fake_github):
    pr = fake_github.make_pull_request()
    event = fake_github.comment_event(pr, "/e2e-run", user="webhook-bot")
    resp = post_event(client, event, event_type="issue_comment")
    assert resp.status_code == 202
    assert resp.get_data(as_text=True) == "No thanks"
    assert not queue_task.called


def test_issue_comment_is_ignored(client, queue_task, fake_github):
    pr = fake_github.make_pull_request()
    event = fake_github.comment_event(pr, "/e2e-run", user="nedbat")
    del event["issue"]["pull_request"]
    resp = post_event(client, event, event_type="issue_comment")
    assert resp.status_code == 202
    assert not queue_task.called


def test_ping(client, queue_task):
    event = {"zen": "Keep it logically awesome.", "hook": {"id": 1}, "repository": {"full_name": "an-org/a-repo"}}
    resp = post_event(client, event, event_type="ping")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "PONG"


def test_other_events(client, queue_task):
    event = {"action": "published", "release": {"tag_name": "v1.0"}}
    resp = post_event(client, event, event_type="release")
    assert resp.status_code == 202
    assert resp.get_data(as_text=True) == "Thank you"
    assert not queue_task.called


class TestTaskStatus:
    def auth_headers(self, username, password):
        token = base64.b64encode(f"{username}:{password}".encode()).decode()
        return {"Authorization": f"Basic {token}"}

    def test_needs_auth(self, client):
        resp = client.get("/tasks/status/abc-123", base_url=BASE_URL)
        assert resp.status_code == 401

    def test_wrong_password(self, client, monkeypatch):
        monkeypatch.setenv("HTTP_BASIC_AUTH_USERNAME", "admin")
        monkeypatch.setenv("HTTP_BASIC_AUTH_PASSWORD", "sekret")
        resp = client.get("/tasks/status/abc-123", base_url=BASE_URL, headers=self.auth_headers("admin", "guess"))
        assert resp.status_code == 401

    def test_status(self, client, monkeypatch, mocker):
        monkeypatch.setenv("HTTP_BASIC_AUTH_USERNAME", "admin")
        monkeypatch.setenv("HTTP_BASIC_AUTH_PASSWORD", "sekret")
        async_result = mocker.patch("ci_webhooks.tasks.celery.AsyncResult")
        async_result.return_value.state = "SUCCESS"
        async_result.return_value.info = {"outcome": "dispatched"}
        resp = client.get("/tasks/status/abc-123", base_url=BASE_URL, headers=self.auth_headers("admin", "sekret"))
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "SUCCESS", "info": {"outcome": "dispatched"}}
        async_result.assert_called_once_with("abc-123")
