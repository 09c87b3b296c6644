"""
LiveCode Backend API package.

Contains:
- main.py: FastAPI application factory, routes and error envelopes
- database.py: in-memory chat/message store and seed loader
- models.py: Pydantic models for API requests/responses
- exceptions.py: HTTP errors raised by the store
- dependencies.py: FastAPI dependencies
- default.json: seed data loaded at startup and on reset
"""
