"""
Envelope Budget - Source Package

A personal-finance ledger for households that budget with envelopes:
accounts, envelopes, transactions and savings goals kept mutually
consistent in a single local session.

DESIGN PRINCIPLES:
1. Validate first, then mutate (no half-applied operations)
2. Fail visibly with a reason tied to the offending input
3. Every mutation is persisted as a full snapshot
4. Every operation outcome is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Envelope Budget Team"
