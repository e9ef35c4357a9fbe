"""
The Celery task logger, and endpoints to see how queued tasks went.
"""

from celery.utils.log import get_task_logger
from flask import Blueprint, jsonify

from ci_webhooks import celery, log_level
from ci_webhooks.utils import requires_auth


logger = get_task_logger(__name__)
logger.setLevel(log_level)

tasks = Blueprint("tasks", __name__)


@tasks.route("/status/<task_id>")
@requires_auth
def status(task_id):
    """The state of a task, and its result (a HandlerResult as JSON) when done."""
    result = celery.AsyncResult(task_id)
    return jsonify({"status": result.state, "info": result.info})


@tasks.route("/statusrepr/<task_id>")
@requires_auth
def statusrepr(task_id):
    # For results that /status can't turn into JSON.
    result = celery.AsyncResult(task_id)
    return jsonify({"status": repr(result.state), "info": repr(result.info)})
