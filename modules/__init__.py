"""
Feature modules for the Explore the Universe backend.

Each module is self-contained with its own subset of:
- interfaces.py: Abstract contracts for stores and services
- models.py: Pydantic models for data transfer
- repository.py / store.py: Supabase data access
- service.py: Business logic
- routes.py: FastAPI route handlers
- exceptions.py: Module-specific exceptions

Routes reach their collaborators through api.dependencies, never directly.
"""
