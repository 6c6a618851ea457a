# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
import sys

from ldap3 import ALL_ATTRIBUTES

from ldaps_shell.commands import (
    ALL_ATTRIBUTES_SUBSET,
    ALL_FILTER,
    ALL_SIZE_LIMIT,
    SEARCH_SIZE_LIMIT,
    UnknownCommand,
    Verb,
    group_filter,
    parse_command,
    user_filter,
)
from ldaps_shell.connection import SearchError
from ldaps_shell.logger import logger

PROMPT = "ldap> "

INTRO = """LDAP search shell - type a command to search
Available commands:
  search <filter>     - search entries (e.g. search (objectClass=person))
  user <username>     - search for a user (e.g. user john)
  group <name>        - search for a group (e.g. group admin)
  all                 - list all entries
  help                - show search examples
  quit                - exit
"""

SEARCH_HELP = """Search examples:
  search (objectClass=person)             - all people
  search (objectClass=organizationalUnit) - organizational units
  search (cn=*admin*)                     - entries whose CN contains admin
  search (&(objectClass=person)(mail=*))  - people with a mail address
  user john                               - user john
  group admin                             - group admin
  all                                     - list all entries"""

# Label and attribute printed for each entry of the "all" listing.
ALL_FIELDS = [
    ("CN", "cn"),
    ("OU", "ou"),
    ("mail", "mail"),
    ("UID", "uid"),
]


class Shell:
    """
    Read-eval loop over a single bound Session.

    Each line is parsed into a Command and dispatched through a handler table
    covering every Verb. Handlers return False to end the loop.
    """

    def __init__(self, session, stdin=None, stdout=None):
        self.session = session
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.handlers = {
            Verb.QUIT: self.do_quit,
            Verb.HELP: self.do_help,
            Verb.SEARCH: self.do_search,
            Verb.USER: self.do_user,
            Verb.GROUP: self.do_group,
            Verb.ALL: self.do_all,
        }

    def echo(self, text=""):
        print(text, file=self.stdout)

    def run(self):
        self.echo(INTRO)
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                logger.debug("End of input")
                break
            if not self.onecmd(line):
                break

    def onecmd(self, line):
        try:
            command = parse_command(line)
        except UnknownCommand as e:
            self.echo(str(e))
            self.echo("type 'help' for available commands")
            return True
        if command is None:
            return True
        return self.handlers[command.verb](command.args)

    def do_quit(self, args):
        self.echo("Bye!")
        return False

    def do_help(self, args):
        self.echo(SEARCH_HELP)
        return True

    def do_search(self, args):
        if not args:
            self.echo("usage: search <filter>")
            return True
        self.search(" ".join(args))
        return True

    def do_user(self, args):
        if not args:
            self.echo("usage: user <username>")
            return True
        self.echo(f"searching user: {args[0]}")
        self.search(user_filter(args[0]))
        return True

    def do_group(self, args):
        if not args:
            self.echo("usage: group <name>")
            return True
        self.echo(f"searching group: {args[0]}")
        self.search(group_filter(args[0]))
        return True

    def do_all(self, args):
        self.echo(f"listing all entries (first {ALL_SIZE_LIMIT}):")
        self.search(
            ALL_FILTER,
            attributes=ALL_ATTRIBUTES_SUBSET,
            size_limit=ALL_SIZE_LIMIT,
            render=self.render_summary,
        )
        return True

    def search(
        self,
        search_filter,
        attributes=ALL_ATTRIBUTES,
        size_limit=SEARCH_SIZE_LIMIT,
        render=None,
    ):
        render = render or self.render_entry
        try:
            entries = self.session.search(
                search_filter, attributes=attributes, size_limit=size_limit
            )
        except SearchError as e:
            self.echo(f"search failed: {e}")
            return

        self.echo(f"found {len(entries)} entries:")
        for i, entry in enumerate(entries, 1):
            self.echo()
            self.echo(f"[{i}] DN: {entry.dn}")
            render(entry)
        self.echo()

    def render_entry(self, entry):
        for name, values in entry.attributes.items():
            if values:
                self.echo(f"  {name}: {', '.join(values)}")

    def render_summary(self, entry):
        object_classes = [v for v in entry.values("objectClass") if v]
        if object_classes:
            self.echo(f"  objectClass: {', '.join(object_classes)}")
        for label, name in ALL_FIELDS:
            value = entry.first(name)
            if value:
                self.echo(f"  {label}: {value}")
