"""
Application Services.

Roles:
- adapter: intents → Gemini requests
- prompts: prompt templates
- workspace: typed results, multi-file analysis, extraction parsing
- chat: contextual chat sessions
"""

from .adapter import GeminiAdapter
from .chat import ChatSession, ChatSessions
from .workspace import WorkspaceService, parse_extracted_text

__all__ = [
    "GeminiAdapter",
    "ChatSession",
    "ChatSessions",
    "WorkspaceService",
    "parse_extracted_text",
]
