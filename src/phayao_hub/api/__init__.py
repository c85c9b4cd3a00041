"""HTTP API for the Phayao Hub service."""
