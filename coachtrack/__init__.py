"""
CoachTrack - training-hour tracking for coaches working towards certification.

This package contains the complete application:
- core: Framework-agnostic business logic
- infrastructure: Storage backends
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
