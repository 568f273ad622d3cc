from .helpers import (
    serialize_mongo_doc,
    success_response,
    parse_object_id,
)
from .exceptions import (
    BadRequestError,
    InvalidPermissionError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
)
from .logger import Logger

__all__ = [
    "serialize_mongo_doc",
    "success_response",
    "parse_object_id",
    "BadRequestError",
    "InvalidPermissionError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "Logger",
]
