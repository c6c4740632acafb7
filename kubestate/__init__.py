"""Prometheus metric families computed from Kubernetes objects given as mappings."""

__version__ = "0.1.0"