"""Tests for the regenerate pre-step: candidate selection and deletion."""

import pytest

from app.services.regeneration import (
    RegenerationCoordinator,
    find_last_ai_message,
    find_last_user_message,
)


def _store(repo, messages):
    for m in messages:
        repo.rows[f"{m.owner}/{m.name}"] = m


# ---------------------------------------------------------------------------
# Candidate Selection Tests
# ---------------------------------------------------------------------------


class TestCandidateSelection:
    """Test the reverse scans and their tie-break order."""

    def test_failed_ai_message_preferred_over_newer_success(self, message_factory):
        u1 = message_factory.create(author="alice")
        a1 = message_factory.create(author="AI", error_text="timeout")
        u2 = message_factory.create(author="alice")
        a2 = message_factory.create(author="AI", error_text="")
        history = [u1, a1, u2, a2]

        assert find_last_ai_message(history) is a1
        assert find_last_user_message(history) is u2

    def test_latest_failed_ai_message_wins(self, message_factory):
        a1 = message_factory.create(author="AI", error_text="first failure")
        a2 = message_factory.create(author="AI", error_text="second failure")
        a3 = message_factory.create(author="AI")
        assert find_last_ai_message([a1, a2, a3]) is a2

    def test_falls_back_to_latest_ai_message(self, message_factory):
        a1 = message_factory.create(author="AI")
        u1 = message_factory.create(author="alice")
        a2 = message_factory.create(author="AI")
        assert find_last_ai_message([a1, u1, a2]) is a2

    def test_no_ai_message(self, message_factory):
        assert find_last_ai_message([message_factory.create(author="alice")]) is None

    def test_no_user_message(self, message_factory):
        assert find_last_user_message([message_factory.create(author="AI")]) is None

    def test_empty_history(self):
        assert find_last_ai_message([]) is None
        assert find_last_user_message([]) is None


# ---------------------------------------------------------------------------
# RegenerationCoordinator Tests
# ---------------------------------------------------------------------------


class TestRegenerationCoordinator:
    """Test prepare_regenerate against an in-memory repository."""

    @pytest.mark.asyncio
    async def test_removes_failed_ai_and_latest_user(self, message_repo, message_factory):
        u1 = message_factory.create(author="alice")
        a1 = message_factory.create(author="AI", error_text="timeout")
        u2 = message_factory.create(author="alice")
        a2 = message_factory.create(author="AI")
        _store(message_repo, [u1, a1, u2, a2])

        result = await RegenerationCoordinator(message_repo).prepare_regenerate("chat_1")

        assert result.ai_message is a1
        assert result.user_message is u2
        remaining = await message_repo.list_for_chat("chat_1")
        assert [m.name for m in remaining] == [u1.name, a2.name]

    @pytest.mark.asyncio
    async def test_removes_latest_pair_without_failures(self, message_repo, message_factory):
        u1 = message_factory.create(author="alice")
        a1 = message_factory.create(author="AI")
        u2 = message_factory.create(author="alice")
        a2 = message_factory.create(author="AI")
        _store(message_repo, [u1, a1, u2, a2])

        await RegenerationCoordinator(message_repo).prepare_regenerate("chat_1")

        remaining = await message_repo.list_for_chat("chat_1")
        assert [m.name for m in remaining] == [u1.name, a1.name]

    @pytest.mark.asyncio
    async def test_empty_chat_is_noop(self, message_repo):
        result = await RegenerationCoordinator(message_repo).prepare_regenerate("chat_1")
        assert result.ai_message is None
        assert result.user_message is None
        assert result.deleted_count == 0

    @pytest.mark.asyncio
    async def test_only_user_message_is_removed(self, message_repo, message_factory):
        u1 = message_factory.create(author="alice")
        _store(message_repo, [u1])

        result = await RegenerationCoordinator(message_repo).prepare_regenerate("chat_1")

        assert result.deleted_count == 1
        assert message_repo.rows == {}

    @pytest.mark.asyncio
    async def test_each_call_removes_at_most_one_pair(self, message_repo, message_factory):
        history = [
            message_factory.create(author="alice"),
            message_factory.create(author="AI"),
            message_factory.create(author="alice"),
            message_factory.create(author="AI"),
        ]
        _store(message_repo, history)
        coordinator = RegenerationCoordinator(message_repo)

        first = await coordinator.prepare_regenerate("chat_1")
        assert first.deleted_count == 2
        assert len(message_repo.rows) == 2

        second = await coordinator.prepare_regenerate("chat_1")
        assert second.deleted_count == 2
        assert message_repo.rows == {}

    @pytest.mark.asyncio
    async def test_other_chats_untouched(self, message_repo, message_factory):
        mine = message_factory.create(author="alice", chat="chat_1")
        other = message_factory.create(author="AI", chat="chat_2")
        _store(message_repo, [mine, other])

        await RegenerationCoordinator(message_repo).prepare_regenerate("chat_1")

        assert list(message_repo.rows.values()) == [other]
