"""Transport adapters exposing the messaging core."""
