"""Structured, non-fatal failures recorded against a page."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    URI_PARSE = "URIParse"
    HTTP_RESPONSE = "HTTPResponse"
    ANCHOR_PARSE = "AnchorParse"
    ID_PARSE = "IdParse"


@dataclass
class CheckError:
    """A failure captured while processing one page.

    ``argname``/``argvalue`` name the offending input (``"url"``,
    ``"anchor"``, ``"line"``); ``cause`` is the message of the underlying
    exception and ``cause_type`` its class name.
    """

    kind: ErrorKind
    description: str
    argname: str
    argvalue: str
    cause: str = ""
    cause_type: str = ""

    @classmethod
    def from_exception(
        cls,
        kind: ErrorKind,
        description: str,
        argname: str,
        argvalue: Any,
        exc: BaseException,
    ) -> CheckError:
        return cls(
            kind=kind,
            description=description,
            argname=argname,
            argvalue=str(argvalue),
            cause=str(exc),
            cause_type=type(exc).__name__,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "description": self.description,
            "argname": self.argname,
            "argvalue": self.argvalue,
            "cause": self.cause,
            "cause_type": self.cause_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CheckError:
        return cls(
            kind=ErrorKind(data["kind"]),
            description=data["description"],
            argname=data["argname"],
            argvalue=data["argvalue"],
            cause=data.get("cause", ""),
            cause_type=data.get("cause_type", ""),
        )
