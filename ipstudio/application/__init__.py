"""Application layer: use cases, services and the authoring flow."""
