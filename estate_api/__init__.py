"""
Estate Listing API: accounts and property listings with photo uploads.
"""

__version__ = "1.0.0"
