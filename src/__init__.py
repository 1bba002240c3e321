"""Roguelike client character birth."""
