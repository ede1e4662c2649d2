"""
Endpoint subpackage for the REST API.

Each module defines an ``APIRouter`` for one record kind (films,
songs) or for login.  The routers are aggregated in ``router.py``.
"""
