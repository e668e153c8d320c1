"""
AgriBridge localization core.

Localizes API payloads for the AgriBridge marketplace (Myanmar numerals,
glossary substitution, thousands grouping) and machine-translates record
text through a cached LLM dispatcher.
"""

__version__ = "0.1.0"
