"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary; stores receive domain records
    - Wire names are camelCase (customerId, totalAmount, itemId); Python names snake_case

Design Decisions:
    - Separate from core/domain_types: schemas are API contracts, dataclasses are state
"""
