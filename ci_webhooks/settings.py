"""Settings for how the webhook should behave."""

import os
import pathlib


GITHUB_PERSONAL_TOKEN = os.environ.get("GITHUB_PERSONAL_TOKEN", None)

# The YAML file describing the labels we react to: the known labels with
# their types, and the user cluster labels with their usernames.
LABELS_FILE = os.environ.get(
    "LABELS_FILE",
    str(pathlib.Path(__file__).parent / "data" / "labels.yaml"),
)

# Dispatched workflows are always checked out from this ref. The pull
# request content is passed to them separately.
WORKFLOWS_REF = os.environ.get("WORKFLOWS_REF", "refs/heads/main")
