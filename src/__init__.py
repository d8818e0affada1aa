"""
Property Compliance Dashboard - Source Root

Holds the local health-indicator enrichment pipeline (src.localhealth).
"""
