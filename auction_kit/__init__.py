"""
auction-kit

Sealed-bid auction settlement engine:
- Bid validation against auction constraints
- Deterministic bid ranking (timestamp or seeded random tie-breaks)
- First-price and second-price settlement, single or multi-unit
"""

__version__ = "0.1.0"
