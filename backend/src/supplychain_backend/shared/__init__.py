"""Shared utilities, value objects and cross-cutting helpers for the backend."""

from supplychain_backend.shared.logger import configure_logging, get_logger
from supplychain_backend.shared.rng import DeterministicRandomService, derive_seed
from supplychain_backend.shared.value_objects import (
    ALL_MATERIALS,
    RAW_MATERIALS,
    Currency,
    MaterialKind,
    Rate,
    WireModel,
    quantize_currency,
)

__all__ = [
    "ALL_MATERIALS",
    "RAW_MATERIALS",
    "Currency",
    "DeterministicRandomService",
    "MaterialKind",
    "Rate",
    "WireModel",
    "configure_logging",
    "derive_seed",
    "get_logger",
    "quantize_currency",
]
