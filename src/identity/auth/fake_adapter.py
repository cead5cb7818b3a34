"""In-memory auth collaborators for development and tests."""

from identity.auth.claims import Claims, ClaimsExtractor, CredentialVerifier
from identity.auth.errors import InvalidCredentialsError


class StaticClaimsExtractor(ClaimsExtractor):
    """Maps known tokens straight to claims."""

    def __init__(self, tokens: dict[str, Claims] | None = None):
        self.tokens = dict(tokens or {})

    def register(self, token: str, claims: Claims) -> None:
        self.tokens[token] = claims

    def extract(self, token: str) -> Claims:
        try:
            return self.tokens[token]
        except KeyError:
            raise InvalidCredentialsError("Invalid or expired token") from None


class InMemoryCredentialVerifier(CredentialVerifier):
    def __init__(self):
        self.accounts: dict[str, tuple[str, Claims]] = {}
        self.calls: list[str] = []

    def register(self, password: str, claims: Claims) -> None:
        self.accounts[claims.subject] = (password, claims)

    def verify(self, email: str, password: str) -> Claims:
        self.calls.append(email)
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise InvalidCredentialsError()
        return account[1]
