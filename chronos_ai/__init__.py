"""Chronos AI core - provider failover, caching and generation pipelines."""

__version__ = "0.1.0"
