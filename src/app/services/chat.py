"""
Chat Service: contextual chat over the shared file registry.

- each message snapshots the registry's file names at send time
- failures become a fixed AI message without file references
- history is per session and lives only in memory
"""

import logging

from src.core.registry import FileRegistry
from src.domain.errors import WorkspaceError
from src.domain.schemas import ChatMessage, Sender

from .adapter import GeminiAdapter

logger = logging.getLogger(__name__)

CHAT_FALLBACK_MESSAGE = (
    "Sorry, I encountered an error while processing your message. Please try again."
)


class ChatSession:
    """
    Chat history for one view.

    Usage:
        session = ChatSession(adapter, registry)
        reply = await session.send("What does main.py do?")
    """

    def __init__(self, adapter: GeminiAdapter, registry: FileRegistry):
        self.adapter = adapter
        self.registry = registry
        self.messages: list[ChatMessage] = []
        self.last_error_code: str | None = None

    async def send(self, text: str) -> ChatMessage | None:
        """
        Send one user message.

        Returns:
            The AI message appended (reply or fallback), None for blank input
        """
        if not text.strip():
            return None

        self.last_error_code = None
        referenced = self.registry.names()
        contexts = self.registry.file_contexts()
        self.messages.append(
            ChatMessage(sender=Sender.USER, text=text, referenced_files=list(referenced))
        )

        try:
            reply = await self.adapter.chat_with_context(text, contexts)
        except WorkspaceError as e:
            logger.debug(f"Chat message failed: [{e.code}]")
            self.last_error_code = e.code
            ai_message = ChatMessage(sender=Sender.AI, text=CHAT_FALLBACK_MESSAGE)
        else:
            ai_message = ChatMessage(
                sender=Sender.AI, text=reply, referenced_files=list(referenced)
            )

        self.messages.append(ai_message)
        return ai_message


class ChatSessions:
    """In-memory session_id → ChatSession map."""

    def __init__(self, adapter: GeminiAdapter, registry: FileRegistry):
        self.adapter = adapter
        self.registry = registry
        self._sessions: dict[str, ChatSession] = {}

    def get(self, session_id: str) -> ChatSession:
        session = self._sessions.get(session_id)
        if session is None:
            session = ChatSession(self.adapter, self.registry)
            self._sessions[session_id] = session
        return session

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def remove(self, session_id: str) -> None:
        """Drop a session (no-op when absent)."""
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
