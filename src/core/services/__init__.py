"""Core services: version negotiation and redirect policy."""
