"""
Application package initializer.

This package contains the FastAPI application of the score archive and
all of its submodules: ``core`` (configuration, logging, errors,
database), ``schemas``, ``repositories``, ``services`` and the
versioned ``api`` routers.
"""

from .main import app  # noqa: F401
