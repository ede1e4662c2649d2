"""
Schemas shared by all record kinds.

``Links`` carries the HATEOAS links added to every record returned by
the REST API.  ``field_messages`` turns a pydantic ``ValidationError``
into the same field → message mapping the record validators produce.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ValidationError


class Link(BaseModel):
    href: str


class Links(BaseModel):
    self: Link
    list: Optional[Link] = None
    add: Optional[Link] = None
    update: Optional[Link] = None
    remove: Optional[Link] = None


def field_messages(exc: ValidationError) -> Dict[str, str]:
    """Map each offending field (dotted path) to its first error message."""
    messages: Dict[str, str] = {}
    for error in exc.errors():
        key = ".".join(str(part) for part in error["loc"]) or "body"
        messages.setdefault(key, error["msg"])
    return messages
