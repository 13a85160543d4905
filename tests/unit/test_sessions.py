"""Unit tests for the per-session engine registry."""

import asyncio

import pytest

from stackit_assistant.clients.offline import OfflineAssistantClient, OfflineTicketClient
from stackit_assistant.engine.conversation import ConversationEngine
from stackit_assistant.engine.sessions import SessionRegistry


def new_engine() -> ConversationEngine:
    return ConversationEngine(
        assistant_client=OfflineAssistantClient(),
        ticket_client=OfflineTicketClient()
    )


class TestSessionRegistry:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_same_session_same_engine(self):
        registry = SessionRegistry(new_engine, ttl_seconds=60, max_size=10)

        first = await registry.get_or_create("abc")
        second = await registry.get_or_create("abc")

        assert first is second
        assert registry.size() == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sessions_are_independent(self):
        registry = SessionRegistry(new_engine, ttl_seconds=60, max_size=10)
        alice = await registry.get_or_create("alice")
        bob = await registry.get_or_create("bob")

        await alice.send_message("please open a ticket for me")

        assert alice.intake_in_progress is True
        assert bob.intake_in_progress is False
        assert len(bob.history) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_expired_session_starts_fresh(self):
        registry = SessionRegistry(new_engine, ttl_seconds=-1, max_size=10)
        first = await registry.get_or_create("abc")

        second = await registry.get_or_create("abc")

        assert first is not second

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_oldest_session_evicted_at_limit(self):
        registry = SessionRegistry(new_engine, ttl_seconds=60, max_size=2)
        first = await registry.get_or_create("one")
        await registry.get_or_create("two")

        await registry.get_or_create("three")

        assert registry.size() == 2
        assert await registry.get_or_create("one") is not first

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cleanup_removes_expired_sessions(self):
        registry = SessionRegistry(new_engine, ttl_seconds=-1, max_size=10)
        await registry.get_or_create("one")
        await registry.get_or_create("two")

        assert await registry.cleanup_expired() == 2
        assert registry.size() == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_periodic_purge_drops_idle_sessions(self):
        registry = SessionRegistry(new_engine, ttl_seconds=-1, max_size=10)
        await registry.get_or_create("one")
        await registry.get_or_create("two")

        task = asyncio.create_task(registry.purge_periodically(0.01))
        try:
            for _ in range(50):
                if registry.size() == 0:
                    break
                await asyncio.sleep(0.01)
        finally:
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert registry.size() == 0
