"""Helpers for tests."""

import re

import requests


def check_good_markdown(text: str) -> None:
    """
    Raise ValueError if `text` has Markdown mistakes templates tend to make.
    """
    if text[:1].isspace():
        raise ValueError(f"Markdown starts with whitespace: {text!r}")
    # An HTML comment sharing a line with text breaks the rendering.
    if re.search(r".<!--|-->.", text):
        raise ValueError(f"HTML comment not on a line of its own: {text!r}")
    # Empty template variables leave `` or a bare @ behind.
    if "``" in text or re.search(r"@(\s|$)", text):
        raise ValueError(f"Markdown has an empty value: {text!r}")


def make_response(status_code: int, text: str = "") -> requests.Response:
    """A requests.Response, for test doubles that don't talk HTTP."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.encoding = "utf-8"
    resp._content = text.encode()  # pylint: disable=protected-access
    return resp
