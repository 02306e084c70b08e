"""Tests for src/security/identity.py — placeholder identity provider."""

from src.config.settings import get_settings
from src.security.identity import FixedIdentityProvider, build_identity_provider


class TestFixedIdentityProvider:

    def test_default_user(self):
        assert FixedIdentityProvider().user_id({}) == 1

    def test_ignores_event(self):
        provider = FixedIdentityProvider(7)
        event = {"requestContext": {"authorizer": {"principalId": "user:bob"}}}
        assert provider.user_id(event) == 7


class TestBuildIdentityProvider:

    def test_uses_configured_user(self, override_settings):
        override_settings(DEFAULT_USER_ID="99")
        provider = build_identity_provider(get_settings())
        assert provider.user_id({}) == 99
