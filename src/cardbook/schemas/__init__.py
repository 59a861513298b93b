"""Pydantic schemas for API payloads and internal pipeline data."""
