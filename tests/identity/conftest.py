import pytest
from identity.auth.claims import Claims, Role
from identity.auth.fake_adapter import InMemoryCredentialVerifier
from identity.auth.rate_limiter import LoginRateLimiter


class FakeClock:
    """Integer epoch seconds under test control."""

    def __init__(self, now=1_700_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def limiter(clock):
    return LoginRateLimiter(clock=clock)


@pytest.fixture()
def verifier():
    verifier = InMemoryCredentialVerifier()
    verifier.register("s3cret", Claims("ana@example.com", "buyer-001", Role.CLIENT, "Ana Buyer"))
    return verifier
