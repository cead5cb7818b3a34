"""Authentication failures."""


class AuthenticationError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidCredentialsError(AuthenticationError):
    def __init__(self, message="Invalid email or password"):
        super().__init__(message)


class LoginBlockedError(AuthenticationError):
    """Too many failed attempts for this email and client address."""

    def __init__(self, remaining_seconds):
        super().__init__(f"Too many failed login attempts. Try again in {remaining_seconds} seconds")
        self.remaining_seconds = remaining_seconds
