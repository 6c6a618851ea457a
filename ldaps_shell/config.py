# Copyright 2022-2025 TII (SSRC) and the Ghaf contributors
# SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass

DEFAULT_PORT = 636


@dataclass(frozen=True)
class LDAPSConfig:
    server: str
    base_dn: str
    username: str
    password: str
    port: int = DEFAULT_PORT
    # Accept whatever certificate the server presents.
    insecure_skip_verify: bool = True

    @property
    def address(self) -> str:
        return f"{self.server}:{self.port}"

    def missing(self):
        """Return the flag names of required settings that are empty."""
        required = [
            ("server", self.server),
            ("basedn", self.base_dn),
            ("username", self.username),
            ("password", self.password),
        ]
        return [name for name, value in required if not value]
