# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_fixed_loan, make_hybrid_loan
"""

from .utils import make_fixed_loan, make_floating_loan, make_hybrid_loan

__all__ = ["make_fixed_loan", "make_floating_loan", "make_hybrid_loan"]
