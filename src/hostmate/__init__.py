"""Hostmate: meal planning with allergy-aware menu suggestions."""

__version__ = "0.1.0"
