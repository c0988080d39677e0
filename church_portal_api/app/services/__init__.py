"""
Service layer.

Each service encapsulates the business rules of a domain: who may
change what, which fields the server stamps, how settings are upserted.
Services receive the ``Storage`` instance as their first argument, so
swapping the in-memory repository for a persistent one does not touch
the API handlers.
"""
