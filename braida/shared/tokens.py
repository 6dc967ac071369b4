"""Share token generation"""

import re
import secrets

SHARE_TOKEN_BYTES = 16  # 128 bits of entropy
SHARE_TOKEN_LENGTH = SHARE_TOKEN_BYTES * 2
SHARE_TOKEN_PATTERN = re.compile(rf"[0-9a-f]{{{SHARE_TOKEN_LENGTH}}}")


class TokenSource:
    """Cryptographically secure random bytes, injected into the share service"""

    def token_bytes(self, nbytes: int) -> bytes:
        raise NotImplementedError


class SecretsTokenSource(TokenSource):
    """Production randomness backed by the OS CSPRNG"""

    def token_bytes(self, nbytes: int) -> bytes:
        return secrets.token_bytes(nbytes)


def generate_share_token(source: TokenSource) -> str:
    """Draw a fixed-length lowercase hex share token"""
    return source.token_bytes(SHARE_TOKEN_BYTES).hex()


def is_well_formed_share_token(value: str) -> bool:
    """Check a raw token has the exact charset and length we mint"""
    return bool(SHARE_TOKEN_PATTERN.fullmatch(value or ""))


def token_hint(token: str) -> str:
    """Short prefix safe to write to logs"""
    return f"{token[:8]}..."
