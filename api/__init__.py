"""
Explore the Universe API package.

The FastAPI application lives in api.app (uvicorn target "api.app:app").
It is not imported here so feature routers can import api.dependencies
without loading the whole application.
"""
