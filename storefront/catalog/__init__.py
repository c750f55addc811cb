"""Catalog module for the storefront service.

This module contains the catalog service that orchestrates product reads and
writes, together with the clients for the document store, the lookaside cache
and the external image host it depends on.
"""
