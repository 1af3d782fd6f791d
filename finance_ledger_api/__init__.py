"""
Top‑level package for the Finance Ledger API.

The package itself exports nothing; the application lives under
``app`` and is importable as ``finance_ledger_api.app.main``.
"""

__all__ = []
