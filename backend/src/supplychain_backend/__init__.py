"""Supply-chain game backend: day-advancement engine and HTTP wiring."""

from supplychain_backend.settings import BackendSettings, get_settings

__all__ = ["BackendSettings", "get_settings"]
