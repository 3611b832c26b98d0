"""Adapters – bindings to concrete database libraries."""
