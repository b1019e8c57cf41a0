# src/blogshive/api/__init__.py
"""HTTP and WebSocket API layer."""
