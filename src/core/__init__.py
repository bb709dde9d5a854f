"""
Core errors, domain models and contract validation.

This module contains the foundational building blocks shared by the ledger,
reaction and gating packages.
"""
