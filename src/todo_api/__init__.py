"""
Todo API package.

A FastAPI service exposing create, read and delete operations on Todo items
over a pluggable in-memory or SQLAlchemy-backed store.
"""
