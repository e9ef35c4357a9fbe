"""
Slash commands in pull request comments that start workflows.

    /e2e-run                run the e2e tests on the user cluster.
    /deploy-web <env>       deploy the web site to <env>.

"""

from __future__ import annotations

import json
from typing import Optional

from ci_webhooks import settings
from ci_webhooks.commands import (
    InvalidCommandSyntax,
    NoSlashCommand,
    SlashCommand,
    extract_command_from_comment,
)
from ci_webhooks.info import (
    ClusterLabelError,
    deploy_web_envs,
    get_user_cluster_labels,
    resolve_user_cluster_label,
)
from ci_webhooks.labels import E2E_WORKFLOW, KnownLabel, LabelType
from ci_webhooks.tasks import logger
from ci_webhooks.tasks.actions import (
    GitHubActions,
    HandlerResult,
    WorkflowStarter,
    pull_request_info,
)
from ci_webhooks.types import CommentEventDict, PrId, Reaction


class SlashCommandHandler(WorkflowStarter):
    """
    Handle a comment on a pull request that might hold a slash command.
    """

    def __init__(self, event: CommentEventDict, actions: GitHubActions | None = None) -> None:
        self.event = event
        self.comment = event["comment"]
        super().__init__(PrId(event["repository"]["full_name"], event["issue"]["number"]), actions)

    def handle(self) -> HandlerResult:
        try:
            command = extract_command_from_comment(self.comment["body"] or "")
        except NoSlashCommand:
            logger.debug(f"No slash command in comment {self.comment['id']} on PR {self.prid}")
            return self.result
        except InvalidCommandSyntax as exc:
            logger.info(f"Ignoring comment {self.comment['id']} on PR {self.prid}: {exc}")
            return self.result

        workflow_id = self._workflow_for(command)
        if workflow_id is None:
            return self.result

        pr = self.actions.get_pull_request()
        try:
            cluster_label = resolve_user_cluster_label(pr)
        except ClusterLabelError as exc:
            self._react(Reaction.CONFUSED)
            return self.fail(f"Error: {exc}")

        self._react(Reaction.ROCKET)
        pr_info = pull_request_info(pr, self.prid.full_name, f"refs/pull/{self.prid.number}/head")
        logger.debug(f"Pull request info: {json.dumps(pr_info)}")
        username = get_user_cluster_labels()[cluster_label].user
        logger.info(f"Username: {username}")
        self.start_workflow(workflow_id, ref=settings.WORKFLOWS_REF, inputs={"username": username})
        return self.result

    def _workflow_for(self, command: SlashCommand) -> Optional[str]:
        """The workflow a command asks for, or None if it isn't one of ours."""
        match command.argv:
            case ["/e2e-run", *_]:
                return E2E_WORKFLOW
            case ["/deploy-web", env] if env in deploy_web_envs():
                return KnownLabel(LabelType.DEPLOY_WEB, env).workflow()
            case ["/deploy-web", *args]:
                self._react(Reaction.CONFUSED)
                self.notice(f"Can't deploy to {' '.join(args)!r}, choose one of: {', '.join(deploy_web_envs())}")
                return None
        self.notice(f"Ignore command {command.name!r} on PR {self.prid}: not ours.")
        return None

    def _react(self, reaction: Reaction) -> None:
        self.actions.create_reaction_for_issue_comment(comment_id=self.comment["id"], content=reaction)
