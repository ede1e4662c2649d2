"""
HTTP plumbing shared by the film and song endpoints.

The helpers return either the wanted value or a ready ``Response`` that
the handler passes straight back to the client:

* ``read_body`` checks the content type and parses the request body
  into a pydantic model.
* ``check_content_type`` alone answers 406 for non-JSON bodies, so
  ``PUT`` can check ``If-Match`` before looking at the body.
* ``version_token`` extracts the version from ``If-Match``.
* ``error_response`` turns a service error value into the status code
  and body clients expect.
* ``record_body`` and ``record_links`` build the response body of a
  record, with HATEOAS links relative to the collection URI.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ValidationError

from ...schemas.common import field_messages
from ...services.errors import ErrorKind, RecordInvalid, ServiceError, message_for

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json"

_STATUS_BY_KIND = {
    ErrorKind.TITLE_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ISAN_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RECORD_NOT_FOUND: status.HTTP_412_PRECONDITION_FAILED,
    ErrorKind.VERSION_INVALID: status.HTTP_412_PRECONDITION_FAILED,
    ErrorKind.VERSION_OUTDATED: status.HTTP_412_PRECONDITION_FAILED,
}


def check_content_type(request: Request) -> Optional[Response]:
    """Return a 406 response unless the request body is JSON."""
    content_type = request.headers.get("content-type", "")
    if content_type.split(";")[0].strip().lower() != JSON_CONTENT_TYPE:
        logger.debug("check_content_type(): unsupported content type %r", content_type)
        return PlainTextResponse(
            f"Content-Type muss {JSON_CONTENT_TYPE} sein",
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
        )
    return None


async def read_body(request: Request, model: Type[M]) -> Union[M, Response]:
    """Parse a JSON request body into ``model``.

    Returns 406 for another content type and 400 with a field mapping
    when the body does not fit the model's types.
    """
    rejected = check_content_type(request)
    if rejected is not None:
        return rejected
    try:
        payload = await request.json()
    except ValueError:
        return PlainTextResponse("Der Request-Body ist kein JSON", status_code=status.HTTP_400_BAD_REQUEST)
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        return JSONResponse(field_messages(exc), status_code=status.HTTP_400_BAD_REQUEST)


def version_token(request: Request) -> Union[str, Response]:
    """Return the version inside ``If-Match: "<version>"``.

    A missing header gives 428, one too short to hold a quoted
    version gives 412.
    """
    if_match = request.headers.get("if-match")
    if if_match is None:
        return PlainTextResponse("Versionsnummer fehlt", status_code=status.HTTP_428_PRECONDITION_REQUIRED)
    if len(if_match) < 3:
        return PlainTextResponse(
            f"Ungueltige Versionsnummer: {if_match}",
            status_code=status.HTTP_412_PRECONDITION_FAILED,
        )
    return if_match[1:-1]


def etag(version: int) -> str:
    return f'"{version}"'


def error_response(error: ServiceError, kind_label: str) -> Response:
    if isinstance(error, RecordInvalid):
        return JSONResponse(error.messages, status_code=status.HTTP_400_BAD_REQUEST)
    code = _STATUS_BY_KIND[error.kind]
    if error.kind is ErrorKind.VERSION_INVALID and error.version is None:
        code = status.HTTP_428_PRECONDITION_REQUIRED
    return PlainTextResponse(message_for(error, kind_label), status_code=code)


def collection_uri(request: Request, route_name: str) -> str:
    return str(request.url_for(route_name))


def record_links(base: str, record_id: str, self_only: bool = False) -> Dict[str, Dict[str, str]]:
    self_uri = f"{base}/{record_id}"
    if self_only:
        return {"self": {"href": self_uri}}
    return {
        "self": {"href": self_uri},
        "list": {"href": base},
        "add": {"href": base},
        "update": {"href": self_uri},
        "remove": {"href": self_uri},
    }


def record_body(model: Type[BaseModel], record: Mapping[str, Any], links: Dict[str, Any]) -> Dict[str, Any]:
    """Serialise a stored record with its links; id and version stay out of the body."""
    body = model.model_validate({**record, "links": links}).model_dump(mode="json", by_alias=True)
    body["_links"] = {rel: link for rel, link in body["_links"].items() if link is not None}
    return body
