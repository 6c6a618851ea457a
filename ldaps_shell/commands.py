# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ldap3.utils.conv import escape_filter_chars

from ldaps_shell.connection import SEARCH_SIZE_LIMIT  # noqa: F401

ALL_SIZE_LIMIT = 50
ALL_FILTER = "(objectClass=*)"
ALL_ATTRIBUTES_SUBSET = ["cn", "ou", "objectClass", "mail", "uid"]


class Verb(Enum):
    QUIT = "quit"
    HELP = "help"
    SEARCH = "search"
    USER = "user"
    GROUP = "group"
    ALL = "all"


ALIASES = {
    Verb.QUIT: ("quit", "exit", "q"),
    Verb.HELP: ("help", "h"),
    Verb.SEARCH: ("search", "s"),
    Verb.USER: ("user", "u"),
    Verb.GROUP: ("group", "g"),
    Verb.ALL: ("all", "a"),
}

VERBS_BY_WORD = {word: verb for verb, words in ALIASES.items() for word in words}


class UnknownCommand(Exception):
    def __init__(self, word):
        self.word = word
        super().__init__(f"unknown command: {word}")


@dataclass
class Command:
    verb: Verb
    args: List[str] = field(default_factory=list)


def parse_command(line: str) -> Optional[Command]:
    """
    Split an input line into a verb and its arguments.

    The verb is matched case-insensitively against ALIASES; arguments are kept
    exactly as typed. Returns None for blank lines and raises UnknownCommand
    when the first word is not a known verb.
    """
    parts = line.split()
    if not parts:
        return None
    word = parts[0].lower()
    verb = VERBS_BY_WORD.get(word)
    if verb is None:
        raise UnknownCommand(word)
    return Command(verb=verb, args=parts[1:])


def user_filter(username: str) -> str:
    name = escape_filter_chars(username)
    return f"(|(uid={name})(cn={name})(sAMAccountName={name}))"


def group_filter(groupname: str) -> str:
    name = escape_filter_chars(groupname)
    return f"(|(cn={name})(name={name}))"
