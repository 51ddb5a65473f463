"""HTTP surface: application factory and request dependencies."""
