"""
FitCRM - Client management for a fitness business.

This package contains the complete application:
- core: Framework-agnostic business logic (clients, exercises)
- infrastructure: Storage backends and external service integrations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
