# Middleware package init
"""
DogAdopt Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [CORS] → [Request ID] → [Security Headers] → [Logging] → [Rate Limit] → [GZip] → Route

    - CORS outermost so 429 and error responses still carry CORS headers
    - Request ID before logging so every log line and error body carries it
    - Security Headers wraps the limiter so 429 responses carry them too
    - Logging records the final status, including 429s from the limiter
    - Rate Limit rejects abusive /api traffic before any database work
"""
