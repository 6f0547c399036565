"""Monitoring: Prometheus metrics for the dispatch engine."""
