# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
import ssl
from dataclasses import dataclass, field
from typing import Dict, List

from ldap3 import (
    ALL_ATTRIBUTES,
    DEREF_NEVER,
    NONE,
    SIMPLE,
    SUBTREE,
    SYNC,
    Connection,
    Server,
    Tls,
)
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SIZE_LIMIT_EXCEEDED, RESULT_SUCCESS

from ldaps_shell.config import LDAPSConfig
from ldaps_shell.logger import logger

SEARCH_SIZE_LIMIT = 1000

STAGE_TRANSPORT = "transport"
STAGE_BIND = "bind"


class LDAPSConnectionError(Exception):
    def __init__(self, stage, cause):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")


class SearchError(Exception):
    pass


def _as_text(value):
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


@dataclass
class Entry:
    dn: str
    attributes: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_response(cls, item):
        attributes = {}
        for name, values in (item.get("attributes") or {}).items():
            if not isinstance(values, (list, tuple)):
                values = [values]
            attributes[name] = [_as_text(v) for v in values]
        return cls(dn=item.get("dn", ""), attributes=attributes)

    def values(self, name):
        """Attribute values by case-insensitive name, empty when absent."""
        wanted = name.lower()
        for key, values in self.attributes.items():
            if key.lower() == wanted:
                return values
        return []

    def first(self, name):
        values = self.values(name)
        return values[0] if values else ""


class Session:
    """
    A bound LDAP connection plus the base DN every search is rooted at.
    """

    def __init__(self, conn, base_dn):
        self.conn = conn
        self.base_dn = base_dn
        self.closed = False

    def search(
        self, search_filter, attributes=ALL_ATTRIBUTES, size_limit=SEARCH_SIZE_LIMIT
    ):
        logger.debug(
            "search base=%s filter=%s attributes=%s size_limit=%s",
            self.base_dn,
            search_filter,
            attributes,
            size_limit,
        )
        try:
            self.conn.search(
                search_base=self.base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
                dereference_aliases=DEREF_NEVER,
                attributes=attributes,
                size_limit=size_limit,
                time_limit=0,
                types_only=False,
                controls=None,
            )
        except LDAPException as e:
            raise SearchError(str(e)) from e

        result = self.conn.result or {}
        code = result.get("result", RESULT_SUCCESS)
        if code not in (RESULT_SUCCESS, RESULT_SIZE_LIMIT_EXCEEDED):
            description = result.get("description") or "error"
            message = result.get("message")
            raise SearchError(f"{description}: {message}" if message else description)

        entries = [
            Entry.from_response(item)
            for item in (self.conn.response or [])
            if item.get("type") == "searchResEntry"
        ]
        if code == RESULT_SIZE_LIMIT_EXCEEDED:
            logger.info("Size limit of %s reached, results truncated", size_limit)
        return entries

    def close(self):
        if self.closed:
            return
        self.closed = True
        _unbind(self.conn)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def _unbind(conn):
    try:
        conn.unbind()
    except LDAPException as e:
        logger.warning("Error while closing connection: %s", e)


def _server(config: LDAPSConfig) -> Server:
    if config.insecure_skip_verify:
        logger.warning(
            "TLS certificate verification is disabled for %s", config.address
        )
    tls = Tls(
        validate=ssl.CERT_NONE if config.insecure_skip_verify else ssl.CERT_REQUIRED,
        sni=config.server,
    )
    return Server(
        config.server, port=config.port, use_ssl=True, tls=tls, get_info=NONE
    )


def connect(config: LDAPSConfig, client_strategy=SYNC) -> Session:
    """
    Opens an LDAPS connection to config.address and binds with the configured
    credentials. Raises LDAPSConnectionError naming the failed stage.
    """
    logger.info("Connecting to %s", config.address)
    try:
        # ldap3 validates host and port while building the Server
        conn = Connection(
            _server(config),
            user=config.username,
            password=config.password,
            authentication=SIMPLE,
            client_strategy=client_strategy,
            auto_bind=False,
            read_only=True,
            raise_exceptions=False,
        )
        conn.open()
    except LDAPException as e:
        raise LDAPSConnectionError(STAGE_TRANSPORT, e) from e

    logger.info("Binding as %s", config.username)
    try:
        bound = conn.bind()
    except LDAPException as e:
        _unbind(conn)
        raise LDAPSConnectionError(STAGE_BIND, e) from e
    if not bound:
        result = conn.result or {}
        cause = result.get("description") or "invalid credentials"
        if result.get("message"):
            cause = f"{cause}: {result['message']}"
        _unbind(conn)
        raise LDAPSConnectionError(STAGE_BIND, cause)

    return Session(conn, config.base_dn)
