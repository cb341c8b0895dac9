"""Core harness primitives."""
