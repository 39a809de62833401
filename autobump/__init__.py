"""Semantic version bumps driven by commit message keywords."""
