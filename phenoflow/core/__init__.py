"""Core types shared across the service."""
