"""
Chat Routes: conversation over the shared file registry.

- POST /api/chat/message → send a message (registry files as context)
- GET /api/chat/messages → session history
- DELETE /api/chat/messages → drop the session and its history

Sessions are in memory only; a missing session_id starts a new one.
"""

import uuid
from typing import Any

from fastapi import APIRouter, Form, Request

from src.app.services.chat import ChatSessions

from .common import require_text

api_router = APIRouter()


def get_sessions(request: Request) -> ChatSessions:
    return request.app.state.chat_sessions


@api_router.post("/message")
async def send_message(
    request: Request,
    message: str = Form(...),
    session_id: str | None = Form(None),
) -> dict[str, Any]:
    """
    Send a chat message.

    Returns:
        session_id, reply (AI message dict), success flag
    """
    require_text(message, "message")
    if not session_id:
        session_id = str(uuid.uuid4())

    session = get_sessions(request).get(session_id)
    reply = await session.send(message)

    return {
        "session_id": session_id,
        "success": session.last_error_code is None,
        "error_code": session.last_error_code,
        "reply": reply.to_dict() if reply else None,
    }


@api_router.get("/messages")
async def list_messages(request: Request, session_id: str) -> dict[str, Any]:
    sessions = get_sessions(request)
    if session_id not in sessions:
        return {"session_id": session_id, "messages": []}

    return {
        "session_id": session_id,
        "messages": [m.to_dict() for m in sessions.get(session_id).messages],
    }


@api_router.delete("/messages")
async def clear_messages(request: Request, session_id: str) -> dict[str, Any]:
    """Reset a session: its history and the session itself are dropped."""
    get_sessions(request).remove(session_id)
    return {"session_id": session_id, "messages": []}
