"""API interfaces."""
