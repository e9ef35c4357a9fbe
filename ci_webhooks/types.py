"""Types used across ci_webhooks."""

import dataclasses
from enum import Enum
from typing import Dict

# GitHub JSON objects are passed around as plain dicts.
PrDict = Dict
LabelEventDict = Dict       # pull_request event, "labeled" or "unlabeled"
CommentEventDict = Dict     # issue_comment event


@dataclasses.dataclass(frozen=True)
class PrId:
    """Which pull request: the repo's "owner/name", and the number."""
    full_name: str
    number: int

    def __str__(self):
        return f"{self.full_name}#{self.number}"


class Reaction(Enum):
    """
    The reactions GitHub allows on an issue comment.
    """
    THUMBS_UP = "+1"
    THUMBS_DOWN = "-1"
    LAUGH = "laugh"
    CONFUSED = "confused"
    HEART = "heart"
    HOORAY = "hooray"
    ROCKET = "rocket"
    EYES = "eyes"
