"""
Split Bill - Settlement Engine

Given the participants of a shared expense event and the itemized bills
they ran up, works out who consumed what, who fronted what, and the
pairwise transfers that settle everyone up.

DESIGN PRINCIPLES:
1. The engine is a pure query: same inputs, same output
2. Bad data degrades to zero and is reported, never raised
3. People are keyed by id, never by display name
4. Storage layer is swappable
"""

from splitbill.engine import compute_settlement

__version__ = "1.0.0"
__author__ = "Split Bill Team"

__all__ = ["compute_settlement"]
