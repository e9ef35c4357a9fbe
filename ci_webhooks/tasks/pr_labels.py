"""
Deciding what a label added to (or removed from) a pull request should do,
and doing it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from ci_webhooks import NOTICE, settings
from ci_webhooks.bot_comments import label_recognition_comment
from ci_webhooks.info import (
    ClusterLabelError,
    classify_label,
    get_known_labels,
    get_user_cluster_labels,
    resolve_user_cluster_label,
)
from ci_webhooks.labels import SKIP_E2E_LABEL, LabelType
from ci_webhooks.tasks import logger
from ci_webhooks.tasks.actions import (
    GitHubActions,
    HandlerResult,
    Outcome,
    WorkflowStarter,
    pull_request_info,
)
from ci_webhooks.types import LabelEventDict, PrId
from ci_webhooks.utils import RequestFailed


@dataclass
class Command:
    """
    What to do about a label event.
    """
    # None: leave the e2e status alone.
    # True: the skip label was added.
    # False: the skip label was removed.
    set_e2e_should_skipped: Optional[bool] = None
    # No label asks for reruns any more, but the record keeps the slot.
    rerun_workflow: bool = False
    trigger_workflow_dispatch: bool = False
    workflows: List[str] = field(default_factory=list)


def detect_command(action: str, label: str) -> Command:
    """
    Decide what to do when `label` is "labeled" or "unlabeled".
    """
    command = Command()
    if label == SKIP_E2E_LABEL:
        command.set_e2e_should_skipped = action == "labeled"
        return command

    # The workflows remove their label from the pull request, so there's
    # nothing to do for "unlabeled".
    label_info = classify_label(label)
    match (action, label_info.type):
        case ("labeled", LabelType.E2E_RUN | LabelType.DEPLOY_WEB):
            workflow_id = label_info.workflow()
            if workflow_id is not None:
                command.workflows = [workflow_id]
                command.trigger_workflow_dispatch = True
    return command


class LabelEventHandler(WorkflowStarter):
    """
    Handle a pull request "labeled" or "unlabeled" event.

    Arguments:
        event: the pull_request webhook event.
        ref: the git ref of the pull request's head commit, like
            "refs/pull/133/head".
        actions: the GitHub calls to use.

    """

    def __init__(self, event: LabelEventDict, ref: str, actions: GitHubActions | None = None) -> None:
        self.event = event
        self.ref = ref
        self.pr = event["pull_request"]
        self.action = event["action"]
        self.label = event["label"]["name"]
        super().__init__(PrId(event["repository"]["full_name"], self.pr["number"]), actions)

    def handle(self) -> HandlerResult:
        try:
            cluster_label = resolve_user_cluster_label(self.pr)
        except ClusterLabelError as exc:
            return self.fail(f"Error: {exc}")

        self._log_context()
        command = detect_command(self.action, self.label)
        logger.info(f"PR {self.prid} was {self.action} with {self.label!r}: {command}")

        if command.set_e2e_should_skipped is not None:
            return self._set_e2e_skipped(command.set_e2e_should_skipped)

        if not command.workflows:
            return self.notice(f"Ignore {self.action!r} event for label {self.label!r}: no workflow to run.")

        if command.trigger_workflow_dispatch:
            self._trigger_workflow_dispatch(command, cluster_label)
        return self.result

    def _log_context(self) -> None:
        logger.info(f"Git ref for workflows: {self.ref}")
        logger.info(f"PR number: {self.prid.number}")
        logger.info(f"PR action: {self.action}")
        logger.info(f"PR action label: {self.label!r}")
        logger.info(f"Current labels: {json.dumps([lbl['name'] for lbl in self.pr['labels']])}")
        logger.info(f"Known labels: {get_known_labels()}")

    def _set_e2e_skipped(self, labeled: bool) -> HandlerResult:
        try:
            self.actions.set_e2e_skipped(sha=self.pr["head"]["sha"], labeled=labeled)
        except (RequestFailed, requests.RequestException) as exc:
            return self.fail(f"Error setting the e2e status for PR {self.prid}: {exc}")
        self.result.outcome = Outcome.STATUS_UPDATED
        return self.result

    def _trigger_workflow_dispatch(self, command: Command, cluster_label: str) -> None:
        """
        Comment on the pull request, and start the workflow.

        A refused comment or dispatch fails the handling.  Any exception
        raised here is only logged, as a DISPATCH_ERROR outcome.
        """
        # Only a single workflow can be started, because of the comment.
        workflow_id = command.workflows[0]
        logger.log(NOTICE, f"Run workflow {json.dumps(command.workflows)} for label {self.label!r}")
        try:
            comment_body = label_recognition_comment(self.event["sender"]["login"], self.label, workflow_id)
            resp = self.actions.add_comment_to_pull_request(comment_body=comment_body)
            if resp.status_code != 201:
                self.fail(f"Error commenting PR {self.prid}: {resp.status_code} {resp.text}")
                return

            pr_info = pull_request_info(self.pr, self.prid.full_name, self.ref)
            logger.debug(f"Pull request info: {json.dumps(pr_info)}")
            username = get_user_cluster_labels()[cluster_label].user
            logger.info(f"Username: {username}")
            self.start_workflow(workflow_id, ref=settings.WORKFLOWS_REF, inputs={"username": username})
        except Exception:   # pylint: disable=broad-exception-caught
            logger.exception(f"GitHub API call error starting {workflow_id!r} for PR {self.prid}")
            self.result.outcome = Outcome.DISPATCH_ERROR
