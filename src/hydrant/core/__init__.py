"""
Core Package.

Contains the transformation logic:
- Source Compiler Engine (LibCST adapter)
- Component Locator
- Hydration Rewrite Pass and Import Augmenter
- Diagnostics, Build Context and the Pipeline Orchestrator
"""
