"""Services Layer — one service class per aggregate, each bound to an AsyncSession.

Invariants:
    - Services own commits; routes never call db.commit()
    - Services raise core/errors.py types, never HTTPException

Design Decisions:
    - AsyncSession injected through the constructor, never imported globally
"""
