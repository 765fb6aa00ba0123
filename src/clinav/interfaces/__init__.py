"""Renderer implementations: ``tui`` (full terminal) and ``prompt`` (questionary)."""
