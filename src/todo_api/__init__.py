"""
Todo API package.

Layers:
- models: the Todo entity
- repositories: storage contract and in-memory adapter
- services: application use cases
- schemas: transfer objects
- main: FastAPI application (``todo_api.main:app``)
"""

__version__ = "0.1.0"
