"""
Local Health Indicators - Core Package

This package contains the local health-indicator enrichment pipeline for the
property compliance dashboard: address-to-area resolution, public health
benchmark retrieval, and indicator normalization.
"""

__version__ = "0.1.0"
