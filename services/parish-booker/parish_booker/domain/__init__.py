"""
Domain layer - Core records and outcomes of the booking store.

This layer contains the persisted entities, seed data and exceptions,
independent of the key-value backend in use.
"""
