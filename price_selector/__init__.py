"""
Price Selector - Applicable Price Resolution Engine

Resolves, for a product, brand and instant, the single applicable price
among overlapping price list entries, selecting the highest priority one.
Resolutions are memoized in a TTL/LRU cache keyed by the normalized query.
"""

__version__ = "0.1.0"
__author__ = "Price Selector Team"
