"""
test_chat_session.py - ChatSession tests

Checks:
1. referenced files are a snapshot taken at send time
2. failures → fixed fallback message without references
3. blank input is ignored
"""

import pytest

from src.app.services.adapter import GeminiAdapter
from src.app.services.chat import CHAT_FALLBACK_MESSAGE, ChatSession, ChatSessions
from src.core.registry import FileRegistry
from src.domain.errors import ErrorCodes
from src.domain.schemas import Sender, UploadedFile


def text_file(name: str, content: str = "body") -> UploadedFile:
    return UploadedFile(name=name, content=content, type="text/plain")


@pytest.fixture
def session(adapter: GeminiAdapter, registry: FileRegistry) -> ChatSession:
    return ChatSession(adapter, registry)


class TestSend:
    """ChatSession.send tests."""

    @pytest.mark.asyncio
    async def test_reply_appended(self, session: ChatSession):
        reply = await session.send("hello")

        assert reply.sender == Sender.AI
        assert reply.text == "fake response"
        assert [m.sender for m in session.messages] == [Sender.USER, Sender.AI]
        assert session.messages[0].text == "hello"
        assert session.last_error_code is None

    @pytest.mark.asyncio
    async def test_registry_contents_sent_as_context(
        self, session: ChatSession, registry: FileRegistry, backend
    ):
        registry.add_files([text_file("a.py", "print(1)")])

        await session.send("explain")

        prompt = backend.last_prompt()
        assert "File: a.py (text/plain)\nContent:\nprint(1)" in prompt
        assert prompt.endswith("explain")

    @pytest.mark.asyncio
    async def test_referenced_files_are_snapshot(
        self, session: ChatSession, registry: FileRegistry
    ):
        registry.add_files([text_file("a.txt"), text_file("b.txt")])

        reply = await session.send("Q")
        registry.remove_file("a.txt")
        registry.add_files([text_file("c.txt")])

        assert reply.referenced_files == ["a.txt", "b.txt"]
        assert session.messages[0].referenced_files == ["a.txt", "b.txt"]

    @pytest.mark.asyncio
    async def test_snapshot_taken_per_message(
        self, session: ChatSession, registry: FileRegistry
    ):
        first = await session.send("one")
        registry.add_files([text_file("a.txt")])
        second = await session.send("two")

        assert first.referenced_files == []
        assert second.referenced_files == ["a.txt"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_ignored(self, session: ChatSession, backend, text: str):
        assert await session.send(text) is None
        assert session.messages == []
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_failure_fallback_without_references(
        self, settings, make_backend, registry: FileRegistry
    ):
        def fail(model, contents):
            raise RuntimeError("boom")

        session = ChatSession(GeminiAdapter(settings, make_backend(fail)), registry)
        registry.add_files([text_file("a.txt")])

        reply = await session.send("Q")

        assert reply.text == CHAT_FALLBACK_MESSAGE
        assert reply.referenced_files is None
        assert session.messages[0].referenced_files == ["a.txt"]
        assert session.last_error_code == ErrorCodes.UPSTREAM_FAILED

    @pytest.mark.asyncio
    async def test_unconfigured_fallback(self, unconfigured_settings, backend, registry):
        session = ChatSession(GeminiAdapter(unconfigured_settings, backend), registry)

        reply = await session.send("Q")

        assert reply.text == CHAT_FALLBACK_MESSAGE
        assert session.last_error_code == ErrorCodes.API_KEY_MISSING
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_error_code_reset_on_success(
        self, settings, make_backend, registry: FileRegistry
    ):
        answers = iter([RuntimeError("boom"), "fine"])

        def respond(model, contents):
            answer = next(answers)
            if isinstance(answer, Exception):
                raise answer
            return answer

        session = ChatSession(GeminiAdapter(settings, make_backend(respond)), registry)

        await session.send("first")
        reply = await session.send("second")

        assert reply.text == "fine"
        assert session.last_error_code is None
        assert len(session.messages) == 4


class TestChatSessions:
    """ChatSessions tests."""

    def test_created_on_demand(self, adapter, registry):
        sessions = ChatSessions(adapter, registry)

        assert "s1" not in sessions
        first = sessions.get("s1")

        assert "s1" in sessions
        assert sessions.get("s1") is first
        assert sessions.get("s2") is not first

    def test_sessions_share_registry(self, adapter, registry):
        sessions = ChatSessions(adapter, registry)

        assert sessions.get("a").registry is sessions.get("b").registry is registry

    def test_remove(self, adapter, registry):
        sessions = ChatSessions(adapter, registry)
        sessions.get("s1")
        sessions.get("s2")

        sessions.remove("s1")
        sessions.remove("missing")

        assert "s1" not in sessions
        assert len(sessions) == 1
        assert sessions.get("s1").messages == []
