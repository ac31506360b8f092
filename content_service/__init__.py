"""Content Service.

Stores metadata envelopes in a blob store, mirrors a searchable projection
into an index, and publishes content-addressed assets.
"""

__version__ = "0.4.0"
