from .settings import BankSettings, get_settings, configure_logging

__all__ = ["BankSettings", "get_settings", "configure_logging"]
