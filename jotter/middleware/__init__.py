"""
Jotter: Middleware Package
============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → Route Handler

    Request ID runs first so the access log line carries the correlation ID;
    the ID is written to the response headers on the way out.
"""
