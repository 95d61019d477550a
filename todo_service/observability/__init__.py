"""Request tracing helpers.

structlog configuration plus the ASGI middleware that logs the start and end of
every request with a request ID.
"""
