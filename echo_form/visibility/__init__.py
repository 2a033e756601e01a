"""Visibility resolution for conditional fields."""

from echo_form.visibility.resolver import VisibilityResolver

__all__ = ["VisibilityResolver"]
