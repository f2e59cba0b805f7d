"""HTTP API module for NIK-PARSE."""

from nik_parse.api.routes import app, get_decoder, get_visitor_store
from nik_parse.api.models import NIKParseRequest, NIKSuccessResponse, NIKErrorResponse

__all__ = [
    "app",
    "get_decoder",
    "get_visitor_store",
    "NIKParseRequest",
    "NIKSuccessResponse",
    "NIKErrorResponse",
]
