from typing import Any, Type

from fastapi import HTTPException
from pydantic import BaseModel


class APIException(HTTPException):
    status_code: int
    detail: str
    description: str

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(self.status_code, detail or self.detail)


class ErrorResponse(BaseModel):
    detail: str


def responses(default: type, *args: Type[APIException]) -> dict[int | str, dict[str, Any]]:
    """Build the OpenAPI `responses` mapping for an endpoint from the exceptions it can raise."""

    out: dict[int | str, dict[str, Any]] = {200: {"model": default}}
    for exc in args:
        entry = out.setdefault(exc.status_code, {"model": ErrorResponse, "description": ""})
        entry["description"] = "\n\n".join(filter(None, [entry["description"], f"{exc.detail}: {exc.description}"]))
    return out
