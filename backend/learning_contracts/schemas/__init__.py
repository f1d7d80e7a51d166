"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Domain enums from core/domain_types.py used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Response schemas read ORM objects directly (from_attributes=True)
"""
