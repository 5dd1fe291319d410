"""
Hydration Rewrite Pass.

Registered with the Source Compiler Engine, this pass turns every class that
the Component Locator recognises into its hydration-capable form:

1.  **Scan**: find the component classes of the module. A module without any
    is returned untouched, byte for byte.
2.  **Import Augmentation**: ensure the runtime helpers are imported once at
    the top of the module.
3.  **Visit**: replace each matched ``ClassDef`` by the output of
    ``update_hydrate_component_class``. The replacement is final; nothing
    beneath a matched class is visited. Every other node is traversed and
    returned unchanged.

Registered components that never matched a class are reported as warnings,
and so is a module whose path matches none of the supplied components.
"""

import logging
from typing import Dict, List, Optional, Set

import libcst as cst

from hydrant.core.diagnostics import Diagnostic
from hydrant.core.import_fixer import ImportAugmenter, runtime_specifiers
from hydrant.core.locator import ComponentIndex, ComponentLocator
from hydrant.core.rewriter.context import PassResult, TransformContext
from hydrant.core.rewriter.hydrate_class import HydrateRuntimeRefs, update_hydrate_component_class
from hydrant.core.rewriter.interface import RewriterPass
from hydrant.enums import DiagnosticCategory, Severity
from hydrant.metadata.schema import ComponentMetadata

logger = logging.getLogger(__name__)

# Helpers every hydrated class calls, whatever the configured helper list says.
CORE_HELPERS = ("register_instance", "create_event", "get_element")


class ComponentScanner(cst.CSTVisitor):
  """
  Collects the names of located component classes without modifying the tree.
  """

  def __init__(self, locator: ComponentLocator, source_file: str) -> None:
    self.locator = locator
    self.source_file = source_file
    self.found: Set[str] = set()

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    cmp = self.locator.locate(node, self.source_file)
    if cmp is not None:
      self.found.add(cmp.component_class_name)
      return False
    return True


class HydrateComponentTransformer(cst.CSTTransformer):
  """
  Replaces located component classes with their hydrated declaration.
  """

  def __init__(
    self,
    locator: ComponentLocator,
    context: TransformContext,
    refs: HydrateRuntimeRefs,
    config: cst.PartialParserConfig,
  ) -> None:
    super().__init__()
    self.locator = locator
    self.context = context
    self.refs = refs
    self.config = config
    self.hydrated: List[str] = []
    self._pending: Dict[cst.ClassDef, ComponentMetadata] = {}

  def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
    cmp = self.locator.locate(node, self.context.file_name)
    if cmp is None:
      return True
    self._pending[node] = cmp
    return False

  def leave_ClassDef(self, original_node: cst.ClassDef, updated_node: cst.ClassDef) -> cst.ClassDef:
    cmp = self._pending.pop(original_node, None)
    if cmp is None:
      return updated_node

    options = self.context.options
    logger.debug("Hydrating %s (%s) in %s", cmp.component_class_name, cmp.tag_name, self.context.file_name)
    self.hydrated.append(cmp.component_class_name)
    return update_hydrate_component_class(
      updated_node,
      cmp,
      self.refs,
      client_bases=options.client_bases,
      bootstrap_decorators=options.bootstrap_decorators,
      config=self.config,
    )


class HydrateComponentPass(RewriterPass):
  """
  Engine pass bound to the component metadata of one build.
  """

  def __init__(self, index: ComponentIndex) -> None:
    """
    Args:
        index: Components registered for the build, keyed by file and class name.
    """
    self.index = index
    self.locator = ComponentLocator(index)

  def _helpers(self, context: TransformContext) -> List[str]:
    return list(dict.fromkeys([*context.options.runtime_helpers, *CORE_HELPERS]))

  def transform(self, module: cst.Module, context: TransformContext) -> PassResult:
    """
    Hydrates every located component class of the module.

    Args:
        module: The parsed module.
        context: File name and compile options of this call.

    Returns:
        PassResult: The rewritten module and any warnings.
    """
    diagnostics: List[Diagnostic] = []
    expected = self.index.for_file(context.file_name)

    scanner = ComponentScanner(self.locator, context.file_name)
    module.visit(scanner)

    for cmp in expected:
      if cmp.component_class_name not in scanner.found:
        diagnostics.append(
          context.diagnostic(
            f"Component '{cmp.tag_name}' expects class '{cmp.component_class_name}', "
            f"which is not declared in this module",
            level=Severity.WARNING,
            category=DiagnosticCategory.HYDRATE,
          )
        )

    if not expected:
      # Components were supplied but none is registered under this path
      for cmp in self.index:
        diagnostics.append(
          context.diagnostic(
            f"Component '{cmp.tag_name}' is registered for '{cmp.source_path}', not '{context.file_name}'; "
            f"class '{cmp.component_class_name}' was not hydrated",
            level=Severity.WARNING,
            category=DiagnosticCategory.HYDRATE,
          )
        )

    if not scanner.found:
      return PassResult(module, diagnostics)

    options = context.options
    specifiers = runtime_specifiers(options.runtime_module, self._helpers(context))
    augmenter = ImportAugmenter(specifiers, options.module_format)
    module = augmenter.ensure_imports(module)
    for warning in augmenter.warnings:
      diagnostics.append(
        context.diagnostic(warning, level=Severity.WARNING, category=DiagnosticCategory.IMPORTS, header="Imports")
      )

    def ref(name: str) -> str:
      return augmenter.references[f"{options.runtime_module}:{name}"]

    refs = HydrateRuntimeRefs(
      register_instance=ref("register_instance"),
      create_event=ref("create_event"),
      get_element=ref("get_element"),
    )

    transformer = HydrateComponentTransformer(self.locator, context, refs, module.config_for_parsing)
    module = module.visit(transformer)
    logger.debug("Hydrated %d class(es) in %s", len(transformer.hydrated), context.file_name)

    return PassResult(module, diagnostics)
