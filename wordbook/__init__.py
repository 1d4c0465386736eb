"""
Wordbook - Dictionary data layer

Categories, vocabulary entries, texts and user preferences for the
dictionary application, with a once-per-day remote refresh, an on-device
cache and a bundled fallback dataset.
"""

__version__ = "1.0.0"
__author__ = "Wordbook Contributors"
