"""Schemas — pydantic models validating lifecycle inputs and shaping outputs."""
