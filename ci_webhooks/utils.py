"""
Generic utilities.
"""

import functools
import hmac
import os
from hashlib import sha256
from time import sleep as retry_sleep   # so that we can patch it for tests.
from typing import Optional

import sentry_sdk
from flask import jsonify, request, Response, url_for

from ci_webhooks import logger


def requires_auth(view):
    """
    Protect a view with HTTP basic auth.

    The one allowed username and password come from the
    HTTP_BASIC_AUTH_USERNAME and HTTP_BASIC_AUTH_PASSWORD environment
    variables.
    """
    @functools.wraps(view)
    def _protected(*args, **kwargs):
        auth = request.authorization
        allowed = (
            auth is not None and
            auth.username == os.environ.get("HTTP_BASIC_AUTH_USERNAME") and
            auth.password == os.environ.get("HTTP_BASIC_AUTH_PASSWORD")
        )
        if not allowed:
            return Response(
                "Credentials are needed to see task status.\n", 401,
                {"WWW-Authenticate": 'Basic realm="ci-webhooks"'},
            )
        return view(*args, **kwargs)
    return _protected


class RequestFailed(Exception):
    """An HTTP request to GitHub came back with an error status."""


def log_check_response(response, raise_for_status=True):
    """
    Log an HTTP exchange at debug level, and maybe check its status.

    Arguments:
        response (requests.Response)
        raise_for_status (bool): if True, an error status raises RequestFailed.
    """
    req = response.request
    logger.debug(f"Request: {req.method} {req.url}: {req.body!r}")
    logger.debug(f"Response: {response.status_code} {response.reason!r} for {response.url}: {response.content!r}")
    if raise_for_status:
        try:
            response.raise_for_status()
        except Exception as exc:
            raise RequestFailed(f"HTTP request failed: {req.method} {req.url}. Response body: {response.content}") from exc


def is_valid_payload(secret: Optional[str], signature: Optional[str], payload: bytes) -> bool:
    """
    Check that a webhook payload really came from GitHub.

    GitHub signs each delivery with the webhook secret, and sends the
    HMAC-SHA256 hex digest in the X-Hub-Signature-256 header, like
    "sha256=a5b1...".  With no secret configured, nothing is valid.
    """
    if not secret or not signature:
        return False
    expected = "sha256=" + hmac.new(secret.encode(), msg=payload, digestmod=sha256).hexdigest()
    return hmac.compare_digest(expected.encode(), signature.encode())


def text_summary(text, length=40):
    """
    Shorten `text` to at most `length` characters by eliding its middle.
    """
    if len(text) <= length:
        return text
    head = (length - 3) // 2
    tail = length - 3 - head
    return f"{text[:head]}...{text[-tail:]}"


def retry_get(session, url, tries=10, **kwargs):
    """
    GET a URL, trying again while the answer is 404.

    Right after a pull request event, GitHub can still answer 404 for that
    pull request for a little while.
    """
    for _ in range(tries - 1):
        resp = session.get(url, **kwargs)
        if resp.status_code != 404:
            return resp
        retry_sleep(.5)
    return session.get(url, **kwargs)


# Every function decorated with @memoize, for clear_memoized_values.
_memoized_functions = []

def memoize(func):
    """Remember what a function returns for the life of the process."""
    cached = functools.lru_cache()(func)
    _memoized_functions.append(cached)
    return cached

def clear_memoized_values():
    """Forget everything @memoize remembered, so that tests are isolated."""
    for func in _memoized_functions:
        func.cache_clear()


# The parts of a WSGI environ a Celery task needs to rebuild the request.
_WSGI_KEYS = {
    "HTTP_HOST", "SERVER_NAME", "SERVER_PORT", "REQUEST_METHOD",
    "SCRIPT_NAME", "PATH_INFO", "QUERY_STRING", "wsgi.url_scheme",
}

def minimal_wsgi_environ():
    return {key: val for key, val in request.environ.items() if key in _WSGI_KEYS}


def queue_task(task, *args, **kwargs):
    """
    Send a task to Celery, and make the 202 response for the webhook.

    The response points to the task status endpoint.
    """
    result = task.delay(*args, wsgi_environ=minimal_wsgi_environ(), **kwargs)
    status_url = url_for("tasks.status", task_id=result.id, _external=True)
    logger.info(f"Queued {task.name}, status at {status_url}")
    resp = jsonify({"message": "queued", "status_url": status_url})
    resp.status_code = 202
    resp.headers["Location"] = status_url
    return resp


def sentry_extra_context(data_dict):
    """Attach each key and value of data_dict to Sentry events as extra data."""
    for key, value in data_dict.items():
        sentry_sdk.set_extra(key, value)
