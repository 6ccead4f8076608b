"""Configuration package."""

from checkout_relay.config.settings import AppConfig, get_config

__all__ = ["AppConfig", "get_config"]
