"""
Management of the e2e requirement (actually a commit status).
"""

from typing import Dict

from ci_webhooks.auth import get_github_session
from ci_webhooks.labels import SKIP_E2E_LABEL
from ci_webhooks.tasks import logger
from ci_webhooks.utils import log_check_response


# The only two statuses the bot sets, under one context.
E2E_CONTEXT = "e2e-tests"

E2E_STATUS_SKIPPED = {
    "context": E2E_CONTEXT,
    "state": "success",
    "description": f"E2e tests are skipped with the {SKIP_E2E_LABEL!r} label",
}

E2E_STATUS_REQUIRED = {
    "context": E2E_CONTEXT,
    "state": "pending",
    "description": "Waiting for e2e tests to pass",
}


def e2e_status_for_skip(labeled: bool) -> Dict[str, str]:
    """The status to set when the skip label is added (or removed)."""
    return E2E_STATUS_SKIPPED if labeled else E2E_STATUS_REQUIRED


def set_e2e_status(repo_name_full: str, sha: str, status: Dict[str, str]) -> Dict:
    """
    Set the e2e status on a commit.

    Arguments:
        repo_name_full: a string like "owner/repo"
        sha: the commit to mark, usually the head of a pull request.
        status:
            a dict with context, state, and description as expected by the
            GitHub API:
            https://docs.github.com/en/rest/commits/statuses#create-a-commit-status

    Returns:
        The status as GitHub recorded it.
    """
    url = f"/repos/{repo_name_full}/statuses/{sha}"
    logger.debug("E2E: POST %s %s", url, status)
    response = get_github_session().post(url, json={"context": E2E_CONTEXT, **status})
    log_check_response(response)
    data = response.json()
    logger.debug("E2E: POSTED %s %s", url, data)
    return data
