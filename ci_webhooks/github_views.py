"""
The endpoint GitHub delivers webhook events to.
"""

import logging

from flask import Blueprint, current_app, request

from ci_webhooks.info import get_bot_username
from ci_webhooks.tasks.github import pull_request_labeled_task, slash_command_task
from ci_webhooks.utils import is_valid_payload, queue_task, sentry_extra_context

github_bp = Blueprint("github_views", __name__)
logger = logging.getLogger(__name__)

# Event keys that every event has, and don't say what kind of event it is.
_COMMON_KEYS = {"action", "sender", "repository", "organization", "installation"}


@github_bp.route("/hook-receiver", methods=("POST",))
def hook_receiver():
    """
    Receive a GitHub webhook event.

    Events with a bad signature get a 403.  Events we act on are queued as
    Celery tasks, and get a 202 pointing to the task status.  Anything else
    gets a short answer and is dropped.
    """
    if not is_valid_payload(
        current_app.config.get("GITHUB_WEBHOOKS_SECRET"),
        request.headers.get("X-Hub-Signature-256"),
        request.data,
    ):
        logger.warning("Webhook delivery rejected: bad signature")
        return "Rejecting because signature doesn't match!", 403

    event = request.get_json()
    repo = event.get("repository", {}).get("full_name")
    action = event.get("action")
    sender = event.get("sender", {}).get("login")
    kind = " ".join(sorted(set(event) - _COMMON_KEYS))
    logger.info(f"Webhook event for {repo}: {action=!r} {sender=!r} [{kind}]")
    logger.debug(f"Webhook event: {event!r}")
    sentry_extra_context({"event": event})

    # pull_request events: action, number, label, pull_request
    # issue_comment events: action, comment, issue (issue.pull_request for PRs)
    match event:
        case {"pull_request": _}:
            return handle_pull_request_event(event)
        case {"comment": _}:
            return handle_comment_event(event)
        case {"zen": _, "hook": _}:
            logger.info(f"Ping for {repo}")
            return "PONG"
        case _:
            return "Thank you", 202


# The pull_request actions that carry a label.
PR_ACTIONS = {
    "labeled",
    "unlabeled",
}

def handle_pull_request_event(event):
    number = event["pull_request"]["number"]
    action = event["action"]
    if action not in PR_ACTIONS:
        logger.debug(f"PR {event['repository']['full_name']}#{number}: nothing to do for {action!r}")
        return "Nothing for me to do", 200

    # The workflows find the pull request's code at this ref.
    return queue_task(pull_request_labeled_task, event, f"refs/pull/{number}/head")


def handle_comment_event(event):
    match event:
        case {"sender": {"login": login}} if login == get_bot_username():
            # Our own comments come back to us as events too.
            pass
        case {"action": "created", "issue": {"pull_request": _}}:
            return queue_task(slash_command_task, event)

    return "No thanks", 202
