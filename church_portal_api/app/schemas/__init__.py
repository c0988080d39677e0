"""
Pydantic schema definitions for API payloads and stored records.

Each domain defines a ``*Create`` model (request body for creation), an
``*Update`` model (all fields optional, used for partial updates) and
a record model returned by the API.  Field names are snake_case in
Python and camelCase on the wire.
"""
