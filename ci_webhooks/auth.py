"""
The authenticated HTTP session for the GitHub REST API.
"""

import requests
from urlobject import URLObject

from ci_webhooks import settings

GITHUB_API = "https://api.github.com"


class BaseUrlSession(requests.Session):
    """
    A requests Session that takes URLs relative to `base_url`.

        session = BaseUrlSession("https://api.github.com")
        session.get("/user")
    """
    def __init__(self, base_url):
        super().__init__()
        self.base_url = URLObject(base_url)

    def request(self, method, url, *args, **kwargs):
        return super().request(method, self.base_url.relative(url), *args, **kwargs)


def get_github_session():
    """
    A session acting as the bot, with its personal access token.
    """
    session = BaseUrlSession(GITHUB_API)
    session.headers.update({
        "Authorization": f"token {settings.GITHUB_PERSONAL_TOKEN}",
        "Accept": "application/vnd.github+json",
    })
    # Don't let a local .netrc override the token.
    session.trust_env = False
    return session
