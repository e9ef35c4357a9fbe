"""
Get information about labels, user clusters, and the bot itself.
"""

import logging
import pathlib
from typing import Dict, Iterable, List

import yaml

from ci_webhooks import settings
from ci_webhooks.auth import get_github_session
from ci_webhooks.labels import (
    UNKNOWN_LABEL,
    KnownLabel,
    LabelType,
    UserClusterLabel,
    author_cluster_label,
)
from ci_webhooks.types import PrDict
from ci_webhooks.utils import log_check_response, memoize

logger = logging.getLogger(__name__)


class ClusterLabelError(Exception):
    """The user cluster for a pull request can't be decided."""


class AuthorClusterLabelMissing(ClusterLabelError):
    """No cluster label on the pull request, and none for its author either."""


class MultipleUserLabels(ClusterLabelError):
    """More than one cluster label on the pull request."""


@memoize
def _read_labels_file() -> Dict:
    """Read the labels YAML file named by settings.LABELS_FILE."""
    path = pathlib.Path(settings.LABELS_FILE)
    logger.debug(f"Reading labels from {path}")
    return yaml.safe_load(path.read_text()) or {}


@memoize
def get_known_labels() -> Dict[str, KnownLabel]:
    """
    Returns the labels we react to, keyed by label name::

        {
            "deploy/web/stage": KnownLabel(type=LabelType.DEPLOY_WEB, env="stage"),
            ...
        }
    """
    known = {}
    for name, info in (_read_labels_file().get("known_labels") or {}).items():
        info = info or {}
        known[name] = KnownLabel(
            type=LabelType.from_str(info.get("type")),
            env=info.get("env"),
        )
    return known


@memoize
def get_user_cluster_labels() -> Dict[str, UserClusterLabel]:
    """Returns the user cluster labels, keyed by label name."""
    return {
        name: UserClusterLabel(name=name, user=info["user"])
        for name, info in (_read_labels_file().get("user_cluster_labels") or {}).items()
    }


def classify_label(label_name: str) -> KnownLabel:
    """What kind of label is this?  Unknown labels are LabelType.OTHER."""
    return get_known_labels().get(label_name, UNKNOWN_LABEL)


def deploy_web_envs() -> List[str]:
    """The environments that have a deploy-web label."""
    return sorted(
        label.env for label in get_known_labels().values()
        if label.type == LabelType.DEPLOY_WEB and label.env
    )


def user_cluster_labels_in(labels: Iterable[Dict]) -> List[str]:
    """
    Find the user cluster labels among `labels`.

    Arguments:
        labels: label dicts as GitHub provides them, with at least "name".

    Returns:
        The names of the user cluster labels, in the order given.
    """
    cluster_labels = get_user_cluster_labels()
    return [label["name"] for label in labels if label["name"] in cluster_labels]


def resolve_user_cluster_label(pr: PrDict) -> str:
    """
    Decide which user cluster label applies to a pull request.

    A single cluster label on the pull request wins.  With none, the author's
    own cluster label is used if it exists.

    Raises:
        MultipleUserLabels: more than one cluster label is on the pull request.
        AuthorClusterLabelMissing: no cluster label, and the author has none.
    """
    found = user_cluster_labels_in(pr["labels"])
    if len(found) > 1:
        raise MultipleUserLabels(f"PR has multiple user labels: {', '.join(found)}")
    if not found:
        author = pr["user"]["login"]
        logger.info(f"No user labels found in PR, using the cluster of the PR author {author!r}")
        found = user_cluster_labels_in([{"name": author_cluster_label(author)}])
        if not found:
            raise AuthorClusterLabelMissing(f"PR author's cluster label not found for {author!r}")
    return found[0]


@memoize
def get_bot_username() -> str:
    """What is the username of the bot?"""
    resp = get_github_session().get("/user")
    log_check_response(resp)
    return resp.json()["login"]
