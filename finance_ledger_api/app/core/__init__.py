"""
Core plumbing: configuration, logging, errors, security and database.
"""
