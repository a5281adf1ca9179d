"""Core resolution and placement logic."""
