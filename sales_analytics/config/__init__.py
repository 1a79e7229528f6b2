"""
Sales Analytics Engine
Configuration Module
"""
from .settings import AnalyticsSettings, MonitoringSettings, Settings, get_settings

__all__ = ["AnalyticsSettings", "MonitoringSettings", "Settings", "get_settings"]
