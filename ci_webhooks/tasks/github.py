"""
Queuable background tasks for GitHub events.
"""

from ci_webhooks import celery
from ci_webhooks.tasks import logger
from ci_webhooks.tasks.actions import GitHubActions, HandlerResult
from ci_webhooks.tasks.pr_labels import LabelEventHandler
from ci_webhooks.tasks.slash_commands import SlashCommandHandler
from ci_webhooks.types import CommentEventDict, LabelEventDict
from ci_webhooks.utils import sentry_extra_context


@celery.task(bind=True)
def pull_request_labeled_task(_, event, ref):
    """A bound Celery task to call pull_request_labeled."""
    try:
        result = pull_request_labeled(event, ref)
    except Exception:
        logger.exception("Couldn't pull_request_labeled_task")
        raise
    return result.as_json()


def pull_request_labeled(event: LabelEventDict, ref: str, actions: GitHubActions | None = None) -> HandlerResult:
    """
    Process a label being added to or removed from a pull request.

    Depending on the label, this sets the e2e commit status, starts a
    workflow, or does nothing.  Handling the same event twice makes the
    same decision, so redelivered webhooks are harmless apart from a second
    workflow run.

    Returns a HandlerResult, which is failed if the event couldn't be handled.
    """
    repo = event["repository"]["full_name"]
    num = event["pull_request"]["number"]
    who = event["sender"]["login"]
    logger.info(f"Processing {event['action']} {event['label']['name']!r} on PR {repo}#{num} by @{who}...")
    sentry_extra_context({"pull_request": event["pull_request"]})

    return LabelEventHandler(event, ref, actions=actions).handle()


@celery.task(bind=True)
def slash_command_task(_, event):
    """A bound Celery task to call slash_command."""
    try:
        result = slash_command(event)
    except Exception:
        logger.exception("Couldn't slash_command_task")
        raise
    return result.as_json()


def slash_command(event: CommentEventDict, actions: GitHubActions | None = None) -> HandlerResult:
    """
    Process a new comment on a pull request, running the slash command in it.
    """
    repo = event["repository"]["full_name"]
    num = event["issue"]["number"]
    who = event["comment"]["user"]["login"]
    logger.info(f"Processing comment {event['comment']['id']} on PR {repo}#{num} by @{who}...")
    sentry_extra_context({"comment": event["comment"]})

    return SlashCommandHandler(event, actions=actions).handle()
