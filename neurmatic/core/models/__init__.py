"""API-facing models of the Neurmatic platform."""
