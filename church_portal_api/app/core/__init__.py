"""Core infrastructure: configuration, logging, security and storage."""
