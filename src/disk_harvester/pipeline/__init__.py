"""Harvest pipeline module.

This module runs the upload stages of a harvest:
- FileUploader: Per-file uploads with partial-failure semantics
- MetadataCollector: JSON inventory of the selection
- LogPublisher: Final run log upload
- run_harvest: Linear orchestration of a whole run
"""

from disk_harvester.pipeline.runner import RunResult, run_harvest

__all__ = ["RunResult", "run_harvest"]
