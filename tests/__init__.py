"""
Test suite for the reaction token ledger

Contains:
- tests/unit/          : Unit tests for ledger, reactions, gating and contracts
"""
