"""
Component Metadata Package.

Schemas for the component descriptions produced by the analysis stage, and
the manifest loader used by the CLI.
"""
