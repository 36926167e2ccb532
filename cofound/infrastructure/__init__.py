"""Infrastructure adapters: persistence, realtime transport, push and queue."""
