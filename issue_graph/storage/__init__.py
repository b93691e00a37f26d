"""Persistence of harvested databases."""
