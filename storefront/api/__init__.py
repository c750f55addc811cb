"""FastAPI application module for the storefront service.

This module contains the FastAPI application, dependency wiring and route
handlers for the product catalog.
"""
