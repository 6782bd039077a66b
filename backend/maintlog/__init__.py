"""MaintLog AI backend."""
