"""
TIL Backend — Pydantic Schemas
===============================

What:  API contracts, kept separate from the ORM models so that internal
       columns (password_hash) never reach a response by accident.
"""
