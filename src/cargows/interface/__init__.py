"""User-facing surfaces for cargows."""
