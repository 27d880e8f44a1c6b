"""Core components: vault scaffolding, identifiers and the global registry."""
