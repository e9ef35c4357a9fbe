"""Tests of the label tables and the user cluster label rules."""

import pathlib

import pytest

from ci_webhooks import settings
from ci_webhooks.info import (
    AuthorClusterLabelMissing,
    ClusterLabelError,
    MultipleUserLabels,
    classify_label,
    deploy_web_envs,
    get_bot_username,
    get_known_labels,
    get_user_cluster_labels,
    resolve_user_cluster_label,
    user_cluster_labels_in,
)
from ci_webhooks.labels import E2E_WORKFLOW, KnownLabel, LabelType, UserClusterLabel


def labels(*names):
    return [{"name": name} for name in names]


def pr_dict(author, *label_names):
    return {"user": {"login": author}, "labels": labels(*label_names)}


@pytest.mark.parametrize("name, known", [
    ("e2e/run", KnownLabel(LabelType.E2E_RUN)),
    ("deploy/web/staging", KnownLabel(LabelType.DEPLOY_WEB, "staging")),
    ("deploy/web/nowhere", KnownLabel(LabelType.DEPLOY_WEB)),
    ("status/ready", KnownLabel(LabelType.OTHER)),
    ("docs", KnownLabel(LabelType.OTHER)),
    ("never-heard-of-it", KnownLabel(LabelType.OTHER)),
])
def test_classify_label(name, known):
    assert classify_label(name) == known


@pytest.mark.parametrize("known, workflow", [
    (KnownLabel(LabelType.E2E_RUN), E2E_WORKFLOW),
    (KnownLabel(LabelType.DEPLOY_WEB, "prod"), "deploy-web-prod.yml"),
    (KnownLabel(LabelType.DEPLOY_WEB), None),
    (KnownLabel(LabelType.OTHER), None),
])
def test_label_workflow(known, workflow):
    assert known.workflow() == workflow


def test_known_labels_are_read_once(mocker):
    assert len(get_known_labels()) == 6
    # Changing the setting doesn't matter: the table was already read.
    mocker.patch("ci_webhooks.settings.LABELS_FILE", "/no/such/file.yaml")
    assert len(get_known_labels()) == 6


def test_user_cluster_labels():
    assert get_user_cluster_labels()["e2e/user/bob"] == UserClusterLabel("e2e/user/bob", "bob-cluster")


def test_deploy_web_envs():
    assert deploy_web_envs() == ["prod", "staging"]


def test_packaged_labels_file(mocker):
    packaged = pathlib.Path(settings.__file__).parent / "data" / "labels.yaml"
    mocker.patch("ci_webhooks.settings.LABELS_FILE", str(packaged))
    assert classify_label("e2e/run") == KnownLabel(LabelType.E2E_RUN)
    assert get_user_cluster_labels() == {}


class TestUserClusterLabelsIn:
    def test_none(self):
        assert user_cluster_labels_in(labels("bug", "e2e/run")) == []

    def test_order_is_kept(self):
        found = user_cluster_labels_in(labels("e2e/user/carol", "bug", "e2e/user/alice"))
        assert found == ["e2e/user/carol", "e2e/user/alice"]

    def test_empty(self):
        assert user_cluster_labels_in([]) == []


class TestResolveUserClusterLabel:
    def test_single_label(self):
        assert resolve_user_cluster_label(pr_dict("dave", "e2e/run", "e2e/user/alice")) == "e2e/user/alice"

    def test_label_wins_over_author(self):
        assert resolve_user_cluster_label(pr_dict("bob", "e2e/user/carol")) == "e2e/user/carol"

    def test_author_fallback(self):
        assert resolve_user_cluster_label(pr_dict("bob", "e2e/run")) == "e2e/user/bob"

    def test_author_missing(self):
        with pytest.raises(AuthorClusterLabelMissing, match="'dave'"):
            resolve_user_cluster_label(pr_dict("dave", "e2e/run"))

    def test_multiple_labels(self):
        with pytest.raises(MultipleUserLabels, match="PR has multiple user labels: e2e/user/alice, e2e/user/carol"):
            resolve_user_cluster_label(pr_dict("bob", "e2e/user/alice", "e2e/user/carol"))

    def test_errors_are_cluster_label_errors(self):
        with pytest.raises(ClusterLabelError):
            resolve_user_cluster_label(pr_dict("dave"))


def test_get_bot_username(fake_github):
    assert get_bot_username() == "webhook-bot"
    assert get_bot_username() == "webhook-bot"
    assert fake_github.requests_made() == [("/user", "GET")]
