"""Configuration module for Disk Harvester.

This module handles application settings:
- SettingsManager: JSON-based settings persistence
- AppSettings: Settings dataclass
- Paths: App data locations and destination blob layout
"""
