from .errors import register_exception_handlers
from .logging import request_id_var, setup_logging
from .middleware import AccessLogMiddleware, RequestIDMiddleware, format_access_line

__all__ = [
    "register_exception_handlers",
    "request_id_var",
    "setup_logging",
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "format_access_line",
]
