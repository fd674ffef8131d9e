"""Tests for the mock bearer-token provider."""

from __future__ import annotations

from datetime import datetime, timezone

from parcelmap.auth.provider import AuthProvider, MockAuthProvider


def _write_fixtures(tmp_path, body: str):
    path = tmp_path / "auth_fixtures.yml"
    path.write_text(body, encoding="utf-8")
    return path


class TestMockAuthProvider:
    def test_fixture_tokens(self):
        provider = MockAuthProvider()
        result = provider.validate_token("dev-token-ayse")
        assert result.valid
        assert result.user_id == "ayse.yilmaz"
        assert result.display_name == "Ayşe Yılmaz"
        assert result.expires_at is None

    def test_unknown_token(self):
        assert not MockAuthProvider().validate_token("nope").valid

    def test_display_name_defaults_to_user_id(self, tmp_path):
        path = _write_fixtures(tmp_path, "tokens:\n  - token: t1\n    user_id: u1\n")
        assert MockAuthProvider(fixtures_path=path).validate_token("t1").display_name == "u1"

    def test_expired_fixture_token(self, tmp_path):
        path = _write_fixtures(
            tmp_path,
            "tokens:\n"
            "  - token: old\n    user_id: u1\n    expires_at: 2000-01-01T00:00:00Z\n"
            "  - token: fresh\n    user_id: u2\n    expires_at: '2999-01-01T00:00:00+00:00'\n",
        )
        provider = MockAuthProvider(fixtures_path=path)
        assert not provider.validate_token("old").valid
        fresh = provider.validate_token("fresh")
        assert fresh.valid
        assert fresh.expires_at == datetime(2999, 1, 1, tzinfo=timezone.utc)

    def test_missing_fixture_file(self, tmp_path):
        provider = MockAuthProvider(fixtures_path=tmp_path / "none.yml")
        assert not provider.validate_token("dev-token-ayse").valid

    def test_satisfies_protocol(self):
        assert isinstance(MockAuthProvider(), AuthProvider)
