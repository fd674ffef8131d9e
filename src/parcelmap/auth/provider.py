"""Bearer-token provider Protocol and mock implementation.

User accounts, login and registration live in an external service; this
module only answers "which user does this token belong to".
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from parcelmap.auth.models import TokenValidation

_DEFAULT_FIXTURES_PATH = Path(__file__).resolve().parents[3] / "config" / "auth_fixtures.yml"


@runtime_checkable
class AuthProvider(Protocol):
    """Protocol for token validation providers."""

    def validate_token(self, token: str) -> TokenValidation: ...


def _parse_expiry(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class MockAuthProvider:
    """Mock provider with static fixture tokens from YAML.

    A fixture entry may carry an ``expires_at`` timestamp; entries without
    one never expire.
    """

    def __init__(self, fixtures_path: str | Path | None = None) -> None:
        self._tokens: dict[str, dict[str, Any]] = {}
        self._load_fixtures(Path(fixtures_path) if fixtures_path else _DEFAULT_FIXTURES_PATH)

    def _load_fixtures(self, path: Path) -> None:
        if not path.exists():
            return
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        for entry in data.get("tokens", []):
            self._tokens[entry["token"]] = {
                "user_id": entry["user_id"],
                "display_name": entry.get("display_name", entry["user_id"]),
                "expires_at": _parse_expiry(entry.get("expires_at")),
            }

    def validate_token(self, token: str) -> TokenValidation:
        info = self._tokens.get(token)
        if info is None:
            return TokenValidation(valid=False)

        expires_at = info["expires_at"]
        if expires_at is not None and datetime.now(timezone.utc) > expires_at:
            return TokenValidation(valid=False)

        return TokenValidation(
            valid=True,
            user_id=info["user_id"],
            display_name=info["display_name"],
            expires_at=expires_at,
        )
