"""Caller identity as vouched for by the external auth service.

Bearer tokens are opaque here; a ``ClaimsExtractor`` turns one into
``Claims`` or raises ``InvalidCredentialsError``. Extracted claims are
trusted as-is.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    CLIENT = "CLIENT"
    SELLER = "SELLER"


@dataclass(frozen=True)
class Claims:
    subject: str  # Email
    user_id: str
    role: Role
    display_name: str | None = None

    def is_seller(self) -> bool:
        return self.role == Role.SELLER


class ClaimsExtractor(ABC):
    @abstractmethod
    def extract(self, token: str) -> Claims:
        """Return the claims carried by ``token``."""


class CredentialVerifier(ABC):
    @abstractmethod
    def verify(self, email: str, password: str) -> Claims:
        """Return the account's claims if the password matches."""
