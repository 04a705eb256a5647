"""Core: domain values, contracts, services and configuration."""
