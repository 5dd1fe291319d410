"""
hydrant Package.

A source-to-source transpiler producing hydration-capable variants of UI
component modules: versions of each component class that can be instantiated
and rendered outside a browser to produce initial markup.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import hydrant
    from hydrant.metadata.schema import ComponentMetadata

    cmp = ComponentMetadata(tag_name="my-button", source_path="button.py")
    print(hydrant.hydrate(code, cmp))

Build Integration
^^^^^^^^^^^^^^^^^

.. code-block:: python

    from hydrant import BuildContext, transform_component_module

    ctx = BuildContext()
    out = transform_component_module(ctx, code, cmp)
    if out is None:
        for diagnostic in ctx.diagnostics:
            print(diagnostic.format())
"""

from typing import Optional

from hydrant.config import CompileOptions, RuntimeConfig
from hydrant.core.build_context import BuildContext
from hydrant.core.diagnostics import Diagnostic, DiagnosticsSink
from hydrant.core.pipeline import (
  MetadataArg,
  ModuleJob,
  transform_component_module,
  transform_component_module_async,
  transform_component_modules,
)
from hydrant.metadata.schema import ComponentMetadata

__version__ = "0.1.0"


def hydrate(code: str, component_metadata: MetadataArg, options: Optional[CompileOptions] = None) -> str:
  """
  Produces the hydration-capable variant of a module in a private build.

  This is a convenience wrapper around ``transform_component_module`` for
  one-off use; builds should share a ``BuildContext`` instead.

  Args:
      code (str): The component module source.
      component_metadata: Metadata of the component(s) declared by the module.
      options (CompileOptions, optional): Engine options.

  Returns:
      str: The transformed source code.

  Raises:
      ValueError: If the transform failed (e.g. syntax errors).
  """
  ctx = BuildContext()
  result = transform_component_module(ctx, code, component_metadata, options)
  if result is None:
    error_msg = "\n".join(d.format() for d in ctx.diagnostics.errors()) or "no output produced"
    raise ValueError(f"Hydration failed:\n{error_msg}")
  return result


__all__ = [
  "BuildContext",
  "CompileOptions",
  "ComponentMetadata",
  "Diagnostic",
  "DiagnosticsSink",
  "ModuleJob",
  "RuntimeConfig",
  "hydrate",
  "transform_component_module",
  "transform_component_module_async",
  "transform_component_modules",
  "__version__",
]
