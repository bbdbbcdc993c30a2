"""Marker-based text extraction over hex-encoded buffers."""
