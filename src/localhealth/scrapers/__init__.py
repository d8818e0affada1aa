"""
Scrapers Package

Clients for external public health data providers.
"""
from src.localhealth.scrapers.fingertips_client import FingertipsClient, ProviderRequestError

__all__ = ["FingertipsClient", "ProviderRequestError"]
