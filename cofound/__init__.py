"""Realtime messaging core for the co-founder matching platform."""
