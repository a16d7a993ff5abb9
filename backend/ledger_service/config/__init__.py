"""Configuration package for the dividend ledger service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
