"""
Generation Processor.

The single entry point a host invokes once per compilation round.

A round consists of:

1.  **Collection**: query the graph for both marker annotations, union the
    results and de-duplicate by declaration identity.
2.  **Validation**: partition candidates into ready and deferred. Deferred
    declarations are returned to the host and never generated this round.
3.  **Collision Check**: derive every target artifact up front and fail fast
    if two interfaces would write the same file.
4.  **Synthesis**: build one model per ready interface. Non-interfaces are
    skipped.
5.  **Emission**: write every model. Nothing is written if synthesis failed.

Fatal conditions (`GenerationError` subclasses) propagate and abort the round.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from autoimpl.config import GeneratorConfig
from autoimpl.enums import DeclarationKind
from autoimpl.errors import NameCollision
from autoimpl.naming import NamingPolicy
from autoimpl.symbols import ClassDeclaration, SymbolGraph
from autoimpl.synthesizer import CodeSynthesizer
from autoimpl.tracer import TraceLogger
from autoimpl.utils.console import log_info, log_success, log_warning
from autoimpl.validator import partition
from autoimpl.writer import ArtifactWriter, CodeGenerator, DependencyDescriptor, artifact_path


class RoundResult(BaseModel):
  """
  Outcome of one generation round.
  """

  artifacts: List[str] = Field(default_factory=list, description="Artifact paths written, relative to the output root.")
  deferred: List[str] = Field(default_factory=list, description="Qualified names returned for a later round.")
  skipped: List[str] = Field(default_factory=list, description="Marked declarations that are not interfaces.")
  pruned: List[str] = Field(default_factory=list, description="Orphaned artifacts dropped after the final round.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Round trace log data.")

  @property
  def has_deferred(self) -> bool:
    return len(self.deferred) > 0


class _DeferredView(SymbolGraph):
  """Restricts a graph to the declarations deferred by the previous round."""

  def __init__(self, graph: SymbolGraph, names: Set[str]) -> None:
    self.graph = graph
    self.names = names

  def declarations(self) -> Iterable[ClassDeclaration]:
    return [d for d in self.graph.declarations() if d.qualified_name in self.names]

  def is_resolved(self, declaration: ClassDeclaration) -> bool:
    return self.graph.is_resolved(declaration)


class Processor:
  """
  Orchestrates collection, validation, synthesis and emission for one round.
  """

  def __init__(
    self,
    code_generator: CodeGenerator,
    config: Optional[GeneratorConfig] = None,
    naming: Optional[NamingPolicy] = None,
  ) -> None:
    """
    Initializes the Processor.

    Args:
        code_generator (CodeGenerator): Host file-creation side channel.
        config (GeneratorConfig, optional): Round settings. Defaults apply if None.
        naming (NamingPolicy, optional): Overrides the configured naming strategy.
    """
    self.config = config or GeneratorConfig()
    self.synthesizer = CodeSynthesizer(self.config, naming=naming)
    self.code_generator = code_generator
    self.writer = ArtifactWriter(code_generator, extension=self.config.extension)

  def collect(self, graph: SymbolGraph) -> List[ClassDeclaration]:
    """
    Unions both marker queries, de-duplicated by identity, in stable order.

    Args:
        graph (SymbolGraph): The host's symbol graph.

    Returns:
        List[ClassDeclaration]: Candidates sorted by qualified name.
    """
    found: Dict[str, ClassDeclaration] = {}
    for marker in (self.config.class_marker, self.config.function_marker):
      for declaration in graph.declarations_annotated_with(marker):
        found.setdefault(declaration.qualified_name, declaration)
    return [found[name] for name in sorted(found)]

  def process(self, graph: SymbolGraph) -> List[ClassDeclaration]:
    """
    Runs one round.

    Args:
        graph (SymbolGraph): The host's symbol graph for this round.

    Returns:
        List[ClassDeclaration]: Deferred declarations to resubmit later.

    Raises:
        GenerationError: On any precondition failure; the round is aborted.
    """
    _, deferred = self._execute(graph)
    return deferred

  def run_round(self, graph: SymbolGraph) -> RoundResult:
    """Runs one round and returns the full result, trace included."""
    result, _ = self._execute(graph)
    return result

  def run_rounds(
    self,
    graph_factory: Callable[[int], SymbolGraph],
    max_rounds: int = 10,
    prune: bool = False,
  ) -> List[RoundResult]:
    """
    Re-runs rounds on deferred declarations until none remain or no progress is made.

    Args:
        graph_factory (Callable[[int], SymbolGraph]): Builds the graph for round N
            (starting at 1), typically re-reading sources plus generated output.
        max_rounds (int): Upper bound on rounds.
        prune (bool): If True, the rounds cover every source of the output root;
            recorded artifacts that were neither written nor left deferred are
            dropped afterwards.

    Returns:
        List[RoundResult]: One result per executed round.
    """
    results: List[RoundResult] = []
    pending: Optional[Set[str]] = None
    deferred: List[ClassDeclaration] = []

    for round_no in range(1, max_rounds + 1):
      graph = graph_factory(round_no)
      if pending is not None:
        graph = _DeferredView(graph, pending)

      result, deferred = self._execute(graph)
      results.append(result)

      remaining = set(result.deferred)
      if not remaining or remaining == pending:
        break
      pending = remaining

    if results and results[-1].deferred:
      log_warning(f"Unresolved after {len(results)} round(s): {', '.join(results[-1].deferred)}")

    if prune and results:
      keep = {path for r in results for path in r.artifacts}
      keep |= {self._target_path(d) for d in deferred if d.kind == DeclarationKind.INTERFACE}
      dropped = self.code_generator.prune(keep)
      if dropped:
        self.code_generator.finish()
        log_info(f"Removed {len(dropped)} orphaned artifact(s): {', '.join(dropped)}")
      results[-1].pruned = dropped
    return results

  def _target_path(self, declaration: ClassDeclaration) -> str:
    return artifact_path(declaration.package, self.synthesizer.target_name(declaration), self.config.extension)

  def _execute(self, graph: SymbolGraph) -> Tuple[RoundResult, List[ClassDeclaration]]:
    tracer = TraceLogger()
    tracer.start_phase("Generation Round")

    tracer.start_phase("Collect", "Querying marker annotations")
    candidates = self.collect(graph)
    tracer.end_phase()

    tracer.start_phase("Validate", "Partitioning ready/deferred")
    ready, deferred = partition(candidates, graph)
    for declaration in deferred:
      tracer.log_deferral(declaration.qualified_name)
    tracer.end_phase()

    interfaces: List[ClassDeclaration] = []
    skipped: List[str] = []
    for declaration in ready:
      if declaration.kind == DeclarationKind.INTERFACE:
        interfaces.append(declaration)
        continue
      skipped.append(declaration.qualified_name)
      tracer.log_skip(declaration.qualified_name, f"kind={declaration.kind.value}")
      if self.config.warn_non_interface:
        log_warning(f"[symbol]{declaration.qualified_name}[/symbol] is marked but is not an interface; skipped.")

    self._check_collisions(interfaces)

    tracer.start_phase("Synthesize", "Building implementations")
    # Every precondition is checked before the first write
    models = [(d, self.synthesizer.synthesize(d)) for d in interfaces]
    tracer.end_phase()

    tracer.start_phase("Emit", "Writing artifacts")
    artifacts: List[str] = []
    for declaration, synthesized in models:
      descriptor = DependencyDescriptor(sources=(declaration.source_path,))
      written = self.writer.write(synthesized, descriptor)
      artifacts.append(written.path)
      tracer.log_artifact(declaration.qualified_name, written.path)
      if written.changed:
        log_success(f"Generated [path]{written.path}[/path] for [symbol]{declaration.qualified_name}[/symbol]")
      else:
        log_info(f"Up to date: [path]{written.path}[/path]")
    tracer.end_phase()

    self.code_generator.finish()

    if deferred:
      log_info(f"Deferring {len(deferred)} unresolved declaration(s) to the next round.")

    tracer.end_phase()
    result = RoundResult(
      artifacts=artifacts,
      deferred=[d.qualified_name for d in deferred],
      skipped=skipped,
      trace_events=tracer.export(),
    )
    return result, deferred

  def _check_collisions(self, interfaces: List[ClassDeclaration]) -> None:
    """
    Raises:
        NameCollision: If two interfaces derive the same artifact path.
    """
    owners: Dict[str, ClassDeclaration] = {}
    for declaration in interfaces:
      path = self._target_path(declaration)
      previous = owners.get(path)
      if previous is not None:
        raise NameCollision(
          f"'{previous.qualified_name}' and '{declaration.qualified_name}' both generate {path}",
          symbol=declaration.qualified_name,
          annotation=self.config.class_marker,
        )
      owners[path] = declaration
