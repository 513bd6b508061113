"""Guided virtual try-on workflow."""
