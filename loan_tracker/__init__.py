"""
Loan Tracker - Source Package

Tracks money lent to friends, family and acquaintances: simple daily
interest, amount due, overdue status and the active / paid / defaulted
lifecycle of each loan.

DESIGN PRINCIPLES:
1. One place for interest math (loans.engine)
2. One place for state changes (loans.store)
3. Fail early, fail visibly
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Loan Tracker Team"
