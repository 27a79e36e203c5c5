"""
Services package for MusicFinder.
"""

from .catalog import CatalogClient, RetryPolicy, TokenCache, NO_RETRY

__all__ = ['CatalogClient', 'RetryPolicy', 'TokenCache', 'NO_RETRY']
