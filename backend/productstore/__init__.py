"""
Product Store — Application Package
====================================

What: A small HTTP CRUD service for a single `products` collection in MongoDB.
Who:  Imported by uvicorn (`productstore.main:app`), pytest, and the `productstore` script.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← method + path → handler
    ├─────────────────────────────────────┤
    │        Services (Operations)        │  ← one storage call per request
    ├─────────────────────────────────────┤
    │   Schemas & Models (Product Codec)  │  ← wire JSON ↔ Product ↔ document
    ├─────────────────────────────────────┤
    │     Database (Storage Gateway)      │  ← client pool, per-request session
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
