"""HTTP API (install with the ``api`` extra)."""
