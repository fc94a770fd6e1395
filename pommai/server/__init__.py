"""HTTP API exposing resolution and session control."""
