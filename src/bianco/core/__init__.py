"""Core errors and constants."""
