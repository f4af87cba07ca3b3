"""
Product Store — Middleware Package
===================================

Middleware Chain:
    Request → [Request Context: ID + access log] → Route Handler
"""
