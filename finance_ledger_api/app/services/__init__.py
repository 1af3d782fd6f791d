"""
Service layer.

Services wrap the SQLite store for one domain each.  ``filters``
holds the list-filter resolver shared by the category and account
services.
"""
