# Middleware package init
"""
Vetlyst Backend — Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Access Log] → [GZip] → [CORS] → Route

    - Request ID runs first, so every access line, every service log line
      and every error body (429 included) carries the same id.
    - Rate Limit rejects floods of form posts before they reach the database;
      directory reads are never counted.
    - The id is echoed in the X-Request-ID response header and in every
      error body, so a support email can quote it.
"""
