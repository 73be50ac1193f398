"""
shopdesk.auth.passwords

Password verification seam for the login flow.

Responsibilities:
- Define the `PasswordVerifier` contract the login route checks credentials with.

Hashing itself (bcrypt, argon2, ...) lives outside this service. Deployments pass
a verifier to `shopdesk.api.app.create_app`; without one, password login is
disabled and every attempt is rejected.
"""

from __future__ import annotations

from typing import Protocol


class PasswordVerifier(Protocol):
    def verify(self, password: str, password_hash: str) -> bool:
        """True when `password` matches the stored `password_hash`."""
        ...
