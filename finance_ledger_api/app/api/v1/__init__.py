"""
Version 1 of the Finance Ledger API.
"""
