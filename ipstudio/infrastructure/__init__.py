"""Infrastructure adapters: persistence, storage, lookup services and the CLI."""
