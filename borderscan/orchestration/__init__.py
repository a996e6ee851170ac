"""
Orchestration module for BorderScan.
"""

from borderscan.orchestration.pipeline import BorderScanPipeline, PipelineResult

__all__ = [
    "BorderScanPipeline",
    "PipelineResult",
]
