"""DevSecOps setup: install pre-commit and CI templates into a project."""

__version__ = "1.0.0"
