"""
Application package initializer.

The API is split by concern: ``core`` holds configuration, logging,
security and database plumbing, ``services`` hold persistence and
filter logic, ``schemas`` the request/response models, and
``api/v1/endpoints`` one router per domain (users, categories,
accounts).
"""

from .main import app  # noqa: F401
