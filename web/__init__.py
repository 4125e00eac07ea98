"""
Web application package for the chess game.

Provides a FastAPI-based REST API for playing against the computer in a
browser or from any HTTP client. Run with: uvicorn web.app:app
"""
