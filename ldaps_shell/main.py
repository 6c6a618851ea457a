# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
import argparse
import sys

from ldaps_shell.config import DEFAULT_PORT, LDAPSConfig
from ldaps_shell.connection import LDAPSConnectionError, connect
from ldaps_shell.logger import logger, setup_logger
from ldaps_shell.shell import Shell

EXAMPLE = (
    'ldaps-shell -server ldap.example.com -basedn "dc=example,dc=com" '
    '-username "cn=admin,dc=example,dc=com" -password "mypassword"'
)

HELP = f"""LDAPS connection tool
Usage:
  ldaps-shell -server <host> -basedn <base DN> -username <user> -password <password> [options]

Required arguments:
  -server     LDAP server host
  -basedn     base DN (e.g. dc=example,dc=com)
  -username   bind user (e.g. cn=admin,dc=example,dc=com)
  -password   bind password

Optional arguments:
  -port       port number (default: {DEFAULT_PORT})
  -loglevel   log level (default: warning)
  -help       show this help

Example:
  {EXAMPLE}"""


VALUE_FLAGS = {
    f"{dash}{name}"
    for name in ("server", "port", "basedn", "username", "password", "loglevel")
    for dash in ("-", "--")
}


def join_flag_values(argv):
    """
    Rewrite "-flag value" pairs as "-flag=value" so that values starting with
    a dash, such as a password "-s3cret", are not taken for options.
    """
    joined = []
    args = iter(argv)
    for arg in args:
        if arg in VALUE_FLAGS:
            value = next(args, None)
            if value is not None:
                arg = f"{arg}={value}"
        joined.append(arg)
    return joined


def parse_args(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="ldaps-shell",
        description="Interactive search shell for an LDAPS directory.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-server", "--server", dest="server", default="")
    parser.add_argument("-port", "--port", dest="port", type=int, default=DEFAULT_PORT)
    parser.add_argument("-basedn", "--basedn", dest="base_dn", default="")
    parser.add_argument("-username", "--username", dest="username", default="")
    parser.add_argument("-password", "--password", dest="password", default="")
    parser.add_argument("-loglevel", "--loglevel", dest="loglevel", default="warning")
    parser.add_argument("-help", "--help", dest="help", action="store_true")
    return parser.parse_args(join_flag_values(argv))


def main(argv=None):
    """
    Reads the connection parameters, binds once and hands the session to the
    interactive shell until the operator quits or input ends.
    """
    args = parse_args(argv)
    if args.help:
        print(HELP)
        return

    setup_logger(args.loglevel)

    config = LDAPSConfig(
        server=args.server,
        port=args.port,
        base_dn=args.base_dn,
        username=args.username,
        password=args.password,
    )
    missing = config.missing()
    if missing:
        print("error: missing required arguments: " + ", ".join(f"-{m}" for m in missing))
        print("use -help for more information")
        print("")
        print("Example:")
        print(EXAMPLE)
        sys.exit(1)

    print(f"Connecting to LDAPS server: {config.address}")
    print(f"Base DN: {config.base_dn}")
    print(f"Username: {config.username}")
    print("---")

    try:
        session = connect(config)
    except LDAPSConnectionError as e:
        logger.critical("LDAPS connection failed: %s", e)
        sys.exit(1)

    print("LDAPS connection established")
    with session:
        Shell(session).run()


if __name__ == "__main__":
    main()
