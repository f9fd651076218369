"""Configuration models and loaders."""

from .config_data import (
    FIXED_RATE_SHIPPING_PROVIDER_KEY,
    STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY,
    STATIC_INVOICE_COLLECTION_PROVIDER_KEY,
    STATIC_PRODUCT_COLLECTION_PROVIDER_KEY,
    ConfigData,
)
from .config_template import load_templated_yaml

__all__ = [
    "ConfigData",
    "load_templated_yaml",
    "FIXED_RATE_SHIPPING_PROVIDER_KEY",
    "STATIC_PRODUCT_COLLECTION_PROVIDER_KEY",
    "STATIC_INVOICE_COLLECTION_PROVIDER_KEY",
    "STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY",
]
