"""Core CLI infrastructure."""
