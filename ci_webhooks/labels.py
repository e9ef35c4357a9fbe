"""
The labels that make things happen on pull requests, and what they mean.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Adding this label to a pull request marks its e2e tests as skipped,
# removing it makes them required again.
SKIP_E2E_LABEL = "skip/e2e"

# A pull request without a user cluster label runs on the author's cluster,
# if the author has one.
USER_CLUSTER_LABEL_PREFIX = "e2e/user/"

E2E_WORKFLOW = "run-e2e-on-user-cluster.yml"


class LabelType(Enum):
    E2E_RUN = "e2e-run"
    DEPLOY_WEB = "deploy-web"
    OTHER = "other"

    @classmethod
    def from_str(cls, value: Optional[str]) -> LabelType:
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class KnownLabel:
    """A label we know about: what kind of label it is, and for which environment."""
    type: LabelType
    env: Optional[str] = None

    def workflow(self) -> Optional[str]:
        """The workflow to run when this label is added, if any."""
        match self.type:
            case LabelType.E2E_RUN:
                return E2E_WORKFLOW
            case LabelType.DEPLOY_WEB if self.env:
                return f"deploy-web-{self.env}.yml"
        return None


# Classification of any label we've never heard of.
UNKNOWN_LABEL = KnownLabel(LabelType.OTHER)


@dataclass(frozen=True)
class UserClusterLabel:
    """A label choosing the user cluster that e2e runs and deploys go to."""
    name: str
    user: str


def author_cluster_label(login: str) -> str:
    """The user cluster label a pull request author would have."""
    return f"{USER_CLUSTER_LABEL_PREFIX}{login}"
