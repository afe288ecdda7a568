"""Utility module for Disk Harvester.

This module provides cross-cutting utilities:
- Logging: Configured logging with secret redaction
- Validators: Input validation for account, container and blob names
- Scratch: Temporary staging files removed on every exit path
"""
