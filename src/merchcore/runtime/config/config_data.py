"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

FIXED_RATE_SHIPPING_PROVIDER_KEY = "aec7a923-9f64-41d0-b17b-0ef64725f576"
STATIC_PRODUCT_COLLECTION_PROVIDER_KEY = "4700456d-a872-4721-8455-1dda7d6da8b6"
STATIC_INVOICE_COLLECTION_PROVIDER_KEY = "240023f1-b5f3-4d8a-b7d7-05ac8a0f1b53"
STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY = "a389c2f3-71d6-4e3d-a30e-89c1ab4db6e8"


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./merchcore.db",
        description="Database connection URL",
    )
    echo: bool = Field(default=False, description="Echo emitted SQL statements")
    create_schema: bool = Field(
        default=True, description="Create missing tables when the engine starts"
    )


class InventoryConfig(BaseModel):
    """Defaults applied when a variant is first associated with a catalog."""

    default_count: int = Field(default=0, ge=0, description="Initial stock count")
    default_low_count: int = Field(
        default=0, ge=0, description="Initial low stock threshold"
    )


class ShippingConfig(BaseModel):
    """Shipping configuration model."""

    fixed_rate_provider_key: str = Field(
        default=FIXED_RATE_SHIPPING_PROVIDER_KEY,
        description="Provider key of the rate table (fixed rate) shipping gateway",
    )


class ProvidersConfig(BaseModel):
    """Capability providers registered at start up.

    Each mapping goes from a provider key to an import reference of the form
    ``package.module:ClassName``.
    """

    collections: dict[str, str] = Field(
        default_factory=lambda: {
            STATIC_PRODUCT_COLLECTION_PROVIDER_KEY: "merchcore.core.providers.collections:StaticProductCollectionProvider",
            STATIC_INVOICE_COLLECTION_PROVIDER_KEY: "merchcore.core.providers.collections:StaticInvoiceCollectionProvider",
            STATIC_CUSTOMER_COLLECTION_PROVIDER_KEY: "merchcore.core.providers.collections:StaticCustomerCollectionProvider",
        },
        description="Entity collection providers",
    )
    shipping: dict[str, str] = Field(
        default_factory=lambda: {
            FIXED_RATE_SHIPPING_PROVIDER_KEY: "merchcore.core.providers.shipping:FixedRateShippingGatewayProvider",
        },
        description="Shipping gateway providers",
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    inventory: InventoryConfig = Field(
        default_factory=InventoryConfig, description="Catalog inventory defaults"
    )
    shipping: ShippingConfig = Field(
        default_factory=ShippingConfig, description="Shipping configuration"
    )
    providers: ProvidersConfig = Field(
        default_factory=ProvidersConfig, description="Provider registrations"
    )
