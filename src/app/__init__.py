"""
App layer: API server (FastAPI).

Roles:
- file upload/registry routes, chat, single-shot AI tools
- Gemini adapter and backend
- no rendering (clients own the UI)
"""
