"""Tests for RenderSession: one-time injection and id counters."""
from __future__ import annotations

import render_session
from render_session import RenderSession, default_session, reset_default_session


class TestClaim:
    def test_first_claim_wins(self):
        session = RenderSession()
        assert session.claim("trajectory-stepper") is True
        assert session.claim("trajectory-stepper") is False
        assert session.claim("trajectory-stepper") is False

    def test_assets_independent(self):
        session = RenderSession()
        assert session.claim("trajectory-stepper")
        assert session.claim("research-cards")

    def test_sessions_independent(self):
        RenderSession().claim("research-cards")
        assert RenderSession().claim("research-cards")

    def test_is_injected(self):
        session = RenderSession()
        assert not session.is_injected("x")
        session.claim("x")
        assert session.is_injected("x")


class TestNextId:
    def test_sequential_per_prefix(self):
        session = RenderSession()
        assert session.next_id("research-carousel") == "research-carousel-1"
        assert session.next_id("research-carousel") == "research-carousel-2"
        assert session.next_id("other") == "other-1"


class TestDefaultSession:
    def test_shared_between_calls(self):
        assert default_session() is default_session()
        assert default_session().claim("research-cards")
        assert not default_session().claim("research-cards")

    def test_ids_continue_across_calls(self):
        assert default_session().next_id("research-carousel") == "research-carousel-1"
        assert default_session().next_id("research-carousel") == "research-carousel-2"

    def test_reset(self):
        default_session().claim("trajectory-stepper")
        fresh = reset_default_session()
        assert fresh is default_session()
        assert fresh is render_session.DEFAULT_SESSION
        assert not fresh.is_injected("trajectory-stepper")
