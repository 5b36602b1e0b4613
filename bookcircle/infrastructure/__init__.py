"""Infrastructure Layer: external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain logic beyond core/errors and core/domain_types
    - Every external failure is mapped into the core/errors hierarchy
"""
