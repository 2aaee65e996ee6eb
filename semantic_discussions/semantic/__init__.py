"""Semantic index: typed facts, the property registry, the store and its rebuilder."""
