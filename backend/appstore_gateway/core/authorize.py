"""Key Validator — decides whether a request's API key matches the configured secret.

Invariants:
    - Exact, case-sensitive equality. Missing or empty credential is never authorized
    - The secret is passed in by the caller, never read from the environment here
"""

from dataclasses import dataclass

from appstore_gateway.core.domain_types import AuthDecision, Credential


@dataclass(frozen=True)
class KeyValidator:
    """Holds the configured secret for the lifetime of the process."""
    secret: str

    def __post_init__(self):
        if not self.secret:
            raise ValueError("KeyValidator requires a non-empty secret")

    def check(self, credential: Credential | str | None) -> AuthDecision:
        return authorize(credential, self.secret)


def authorize(credential: Credential | str | None, secret: str) -> AuthDecision:
    """Compare request credential with secret."""
    if not credential or credential != secret:
        return AuthDecision.UNAUTHORIZED
    return AuthDecision.AUTHORIZED
