"""
FastAPI RESTful API for the Book Library.

This module provides a REST API for:
- Creating, listing, fetching and deleting books
- Bearer token authentication
- Per-user ownership of every book
"""
