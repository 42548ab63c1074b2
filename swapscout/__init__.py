"""Swap Scout - DEX swap extraction and trader analytics for Aptos accounts."""

__version__ = "0.1.0"
