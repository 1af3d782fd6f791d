"""
Pydantic schema definitions for API payloads.

Request and response bodies are kept apart from the SQLite rows so
that the password hash, for example, never leaks into a response.
"""
