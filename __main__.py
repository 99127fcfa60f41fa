"""Pulumi entry point (``runtime: python`` runs this module)."""

from skyforge.engine.pulumi_program import run

run()
