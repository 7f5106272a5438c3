"""HTTP API for carbonlog."""
