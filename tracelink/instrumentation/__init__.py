"""HTTP propagation helpers."""

from tracelink.instrumentation.http_client import inject_headers as inject_http_headers
from tracelink.instrumentation.http_server import extract_span, start_server_span
from tracelink.instrumentation.fastapi import install_http_middleware

__all__ = [
    "inject_http_headers",
    "extract_span",
    "start_server_span",
    "install_http_middleware",
]
