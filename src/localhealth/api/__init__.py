"""
API Package

FastAPI application exposing the health indicator pipeline.
"""
