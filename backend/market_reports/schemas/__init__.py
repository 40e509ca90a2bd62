"""Pydantic Schemas: request validation and response shapes for the HTTP surface."""
