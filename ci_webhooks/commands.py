"""
Slash commands written in pull request comments.
"""

import re
from dataclasses import dataclass
from typing import List


class CommandParseError(Exception):
    """A comment doesn't hold a usable slash command."""


class NoSlashCommand(CommandParseError):
    pass


class InvalidCommandSyntax(CommandParseError):
    pass


# Commands are lowercase, with digits and a little punctuation.
COMMAND_RE = re.compile(r"/[a-z\d_\-/.,]+")

LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")


@dataclass(frozen=True)
class SlashCommand:
    # The words of the first slash command line: the command and its arguments.
    argv: List[str]
    # All the lines of the comment that start with a slash.
    lines: List[str]

    @property
    def name(self) -> str:
        return self.argv[0]

    @property
    def args(self) -> List[str]:
        return self.argv[1:]


def extract_command_from_comment(comment: str) -> SlashCommand:
    """
    Find the slash command in a comment.

    Only the first line starting with a slash is used as a command, and its
    first word must look like a command: ``/deploy-web prod``.

    Raises:
        NoSlashCommand: no line of the comment starts with a slash.
        InvalidCommandSyntax: the first slash line isn't a proper command.
    """
    lines = [line for line in LINE_BREAK_RE.split(comment) if line.startswith("/")]
    if not lines:
        raise NoSlashCommand("No line of the comment is a slash command")

    argv = lines[0].split()
    if not COMMAND_RE.fullmatch(argv[0]):
        raise InvalidCommandSyntax(f"Not a slash command: {argv[0]!r}")

    return SlashCommand(argv=argv, lines=lines)
