"""Core backend infrastructure for the ScoreHeroes match backend.

This package contains configuration, logging, database and dependency
helpers used by the FastAPI application entrypoint.
"""
