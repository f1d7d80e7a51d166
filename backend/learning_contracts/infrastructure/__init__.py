"""Infrastructure Layer — database session management and logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver exceptions are mapped to core/errors.py types before leaving this layer
"""
