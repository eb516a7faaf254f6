"""Application-level routes (health and readiness)."""
