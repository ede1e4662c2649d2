"""
Application package initializer.

The catalog is organised into logical pieces: ``core`` holds
configuration, logging, storage, mail and security helpers,
``services`` the business logic per record kind, ``schemas`` the
pydantic payloads and ``api`` the REST and GraphQL transport layers.
"""

from .main import app  # noqa: F401
