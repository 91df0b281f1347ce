"""
Core business logic for training-hour tracking.

This module is framework-agnostic - it doesn't import FastAPI, SQLAlchemy,
or any infrastructure concerns. This separation means we can test the
progress rules in isolation and swap storage backends if needed.
"""
