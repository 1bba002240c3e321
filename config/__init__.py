"""Configuration package for the roguelike birth client."""
