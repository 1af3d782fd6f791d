"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` for one domain (users, auth,
categories, accounts).  They are aggregated in ``router.py``.
"""
