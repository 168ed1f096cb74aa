from __future__ import annotations
import hashlib
import hmac
import secrets
from dataclasses import dataclass

USERNAME_PREFIX = "temp_"

@dataclass(frozen=True)
class TemporaryCredentials:
    username: str
    password: str

def issue_credentials() -> TemporaryCredentials:
    # 64 bits for the username, 96 bits for the password
    return TemporaryCredentials(
        username=f"{USERNAME_PREFIX}{secrets.token_hex(8)}",
        password=secrets.token_hex(12),
    )

def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()

def verify_password(password: str, password_hash: str) -> bool:
    return hmac.compare_digest(hash_password(password), password_hash)
