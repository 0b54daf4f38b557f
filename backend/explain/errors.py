"""Errors raised while turning EXPLAIN input into a plan graph."""

from typing import Dict, Optional

EMPTY_INPUT = "EMPTY_INPUT"
INVALID_FORMAT = "INVALID_FORMAT"
PARSE_ERROR = "PARSE_ERROR"


class ExplainParseError(Exception):
    """Terminal failure for one pipeline run. Carries a code for the UI."""

    code = PARSE_ERROR

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class EmptyInput(ExplainParseError):
    code = EMPTY_INPUT


class MalformedSyntax(ExplainParseError):
    code = PARSE_ERROR


class UnrecognizedFormat(ExplainParseError):
    code = INVALID_FORMAT
