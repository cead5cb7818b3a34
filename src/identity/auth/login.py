"""Password login guarded by the rate limiter."""

from identity.auth.claims import Claims, CredentialVerifier
from identity.auth.errors import InvalidCredentialsError, LoginBlockedError
from identity.auth.rate_limiter import LoginRateLimiter, login_key
from identity.utils.logging import get_logger

logger = get_logger(__name__)


class LoginService:
    def __init__(self, verifier: CredentialVerifier, limiter: LoginRateLimiter):
        self.verifier = verifier
        self.limiter = limiter

    def login(self, email: str, password: str, client_ip: str) -> Claims:
        """Verify credentials unless the email/address pair is blocked.

        Raises:
            LoginBlockedError: checked before the password is looked at.
            InvalidCredentialsError: the failure is counted first.
        """
        key = login_key(email, client_ip)
        if self.limiter.is_blocked(key):
            remaining = self.limiter.remaining_block_seconds(key)
            logger.warning("Blocked login attempt", email=email, client_ip=client_ip, remaining_seconds=remaining)
            raise LoginBlockedError(remaining)

        try:
            claims = self.verifier.verify(email, password)
        except InvalidCredentialsError:
            attempts = self.limiter.record_failed_attempt(key)
            logger.info("Login failed", email=email, client_ip=client_ip, attempts=attempts)
            raise

        self.limiter.reset_attempts(key)
        logger.info("Login succeeded", user_id=claims.user_id)
        return claims
