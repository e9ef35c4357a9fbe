"""
GitHub calls made by the event handlers, and starting workflows with them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import requests
from glom import glom

from ci_webhooks import NOTICE
from ci_webhooks.auth import get_github_session
from ci_webhooks.e2e_status import e2e_status_for_skip, set_e2e_status
from ci_webhooks.tasks import logger
from ci_webhooks.types import PrDict, PrId, Reaction
from ci_webhooks.utils import log_check_response, retry_get, text_summary


class GitHubActions:
    """
    The GitHub API calls the event handlers make.

    Handlers accept an `actions` object so that something else can stand in
    for GitHub.  Calls whose status code the handler judges for itself return
    the response unchecked; the others raise RequestFailed on errors.

    """

    def __init__(self, prid: PrId):
        self.prid = prid

    def get_pull_request(self) -> PrDict:
        """
        Get the full description of the pull request.
        """
        url = f"/repos/{self.prid.full_name}/pulls/{self.prid.number}"
        resp = retry_get(get_github_session(), url)
        log_check_response(resp)
        return resp.json()

    def create_reaction_for_issue_comment(self, *, comment_id: int, content: Reaction) -> requests.Response:
        """
        React to a comment on the pull request.
        """
        url = f"/repos/{self.prid.full_name}/issues/comments/{comment_id}/reactions"
        logger.info(f"Reacting {content.value!r} to comment {comment_id} on PR {self.prid}")
        resp = get_github_session().post(url, json={"content": content.value})
        log_check_response(resp)
        return resp

    def add_comment_to_pull_request(self, *, comment_body: str) -> requests.Response:
        """
        Add a comment to a pull request.
        """
        url = f"/repos/{self.prid.full_name}/issues/{self.prid.number}/comments"
        logger.info(f"Commenting on PR {self.prid}: {text_summary(comment_body, 90)!r}")
        resp = get_github_session().post(url, json={"body": comment_body})
        log_check_response(resp, raise_for_status=False)
        return resp

    def create_workflow_dispatch(self, *, workflow_id: str, ref: str, inputs: Dict[str, str]) -> requests.Response:
        """
        Fire a workflow_dispatch event for a workflow in the repo.
        """
        url = f"/repos/{self.prid.full_name}/actions/workflows/{workflow_id}/dispatches"
        resp = get_github_session().post(url, json={"ref": ref, "inputs": inputs})
        log_check_response(resp, raise_for_status=False)
        return resp

    def set_e2e_skipped(self, *, sha: str, labeled: bool) -> None:
        set_e2e_status(self.prid.full_name, sha, e2e_status_for_skip(labeled))


class Outcome(Enum):
    NOOP = "noop"
    STATUS_UPDATED = "status_updated"
    DISPATCHED = "dispatched"
    # Something broke while dispatching, and was only logged.
    DISPATCH_ERROR = "dispatch_error"
    FAILED = "failed"


@dataclass
class HandlerResult:
    """
    What came of handling one event.
    """
    outcome: Outcome = Outcome.NOOP
    # Why the handling failed, if it did.
    failure: Optional[str] = None
    # The workflow we tried to start, and its inputs.
    workflow_id: Optional[str] = None
    inputs: Dict[str, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILED

    def as_json(self) -> Dict:
        return {
            "outcome": self.outcome.value,
            "failure": self.failure,
            "workflow_id": self.workflow_id,
            "inputs": self.inputs,
        }


def pull_request_info(pr: PrDict, repo_full_name: str, ref: str) -> Dict[str, str]:
    """
    Describe where a workflow can find the content of a pull request.

    Workflows are checked out from settings.WORKFLOWS_REF, not from the pull
    request, so the pull request is described separately.  Pull requests from
    forks (or from deleted repos) don't have a usable branch name here, so
    they get a made-up one.
    """
    number = pr["number"]
    head_repo = glom(pr, "head.repo.full_name", default=None)
    return {
        "ci_commit_ref_name": pr["head"]["ref"] if head_repo == repo_full_name else f"pr{number}",
        "pull_request_ref": ref,
        "pull_request_sha": pr["head"]["sha"],
        "pull_request_head_label": pr["head"]["label"],
    }


class WorkflowStarter:
    """
    The base for event handlers: reporting, and starting workflows.
    """

    def __init__(self, prid: PrId, actions: GitHubActions | None = None) -> None:
        self.prid = prid
        self.actions = actions or GitHubActions(prid)
        self.result = HandlerResult()

    def fail(self, message: str) -> HandlerResult:
        """
        Report a failure that ends the handling of this event.
        """
        logger.error(message)
        self.result.outcome = Outcome.FAILED
        self.result.failure = message
        return self.result

    def notice(self, message: str) -> HandlerResult:
        logger.log(NOTICE, message)
        return self.result

    def start_workflow(self, workflow_id: str, ref: str, inputs: Dict[str, str] | None = None) -> bool:
        """
        Start a workflow with a workflow_dispatch event.

        A failure to start is reported with `fail`, not raised.

        Arguments:
            workflow_id: the name of the workflow YAML file.
            ref: the git ref to run the workflow from.
            inputs: the inputs for the workflow_dispatch event.

        Returns:
            True if GitHub accepted the dispatch.
        """
        inputs = inputs or {}
        logger.info(f"Start workflow {workflow_id!r} using ref {ref!r} and inputs {json.dumps(inputs)}.")
        self.result.workflow_id = workflow_id
        self.result.inputs = inputs

        try:
            resp = self.actions.create_workflow_dispatch(workflow_id=workflow_id, ref=ref, inputs=inputs)
        except requests.RequestException as exc:
            self.fail(f"Error triggering workflow_dispatch event: {exc!r}")
            return False

        logger.debug(f"status: {resp.status_code}")
        logger.debug(f"workflow dispatch response: {resp.text!r}")

        if resp.status_code != 204:
            self.fail(
                f"Error triggering workflow_dispatch event for {workflow_id!r}. " +
                f"Response: {resp.status_code} {resp.text}"
            )
            return False

        logger.info(f"Workflow {workflow_id!r} started successfully")
        self.result.outcome = Outcome.DISPATCHED
        return True
