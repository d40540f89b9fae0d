"""
FastAPI Routes.

API routes only; rendering is left to the client.
"""

from . import chat, files, tools

__all__ = ["chat", "files", "tools"]
