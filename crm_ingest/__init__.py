"""
CRM account-export CSV ingestion.
"""

__version__ = "1.0.0"
