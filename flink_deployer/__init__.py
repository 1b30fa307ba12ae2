"""Flink job lifecycle deployer: deploy, update and terminate cluster jobs."""

__version__ = "1.0.0"
