"""
The bot makes comments on pull requests. This is stuff needed to do it well.
"""

from enum import Enum, auto

from flask import render_template


class BotComment(Enum):
    """
    Comments the bot can leave on pull requests.
    """
    LABEL_RECOGNIZED = auto()


BOT_COMMENT_INDICATORS = {
    BotComment.LABEL_RECOGNIZED: [
        "<!-- comment:label_recognized -->",
    ],
}


def is_comment_kind(kind: BotComment, text: str) -> bool:
    """
    Is this `text` a comment of this `kind`?
    """
    return any(snip in text for snip in BOT_COMMENT_INDICATORS[kind])


def label_recognition_comment(sender: str, label: str, workflow_id: str) -> str:
    """
    Tell the person who added a label that we understood it, and which
    workflow is about to run because of it.
    """
    return render_template(
        "label_recognition_comment.md.j2",
        sender=sender,
        label=label,
        workflow_id=workflow_id,
    )
