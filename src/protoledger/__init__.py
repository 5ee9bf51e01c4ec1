"""protoledger - versioned prototype documents with optimistic concurrency."""

__version__ = "0.1.0"
