"""Provisioning engine boundary.

The only place that imports Pulumi. Everything upstream produces plain
descriptors; this package turns them into engine resources.
"""
