"""
Round Trace Logger.

Records what a generation round did, step by step:
1. Lifecycle phases (Collect, Validate, Synthesize).
2. Artifacts written, with the declaration they came from.
3. Declarations skipped (non-interfaces) or deferred (unresolved).

The output is a list of plain dicts suitable for JSON serialization, attached
to `RoundResult.trace_events`.
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  ARTIFACT_WRITTEN = "artifact_written"
  SYMBOL_SKIPPED = "symbol_skipped"
  SYMBOL_DEFERRED = "symbol_deferred"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records generation events. One logger per round.
  """

  def __init__(self) -> None:
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []  # Stack of phase IDs

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase. Returns the phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_artifact(self, symbol: str, path: str) -> None:
    self._log_simple(TraceEventType.ARTIFACT_WRITTEN, f"Wrote {path}", {"symbol": symbol, "path": path})

  def log_skip(self, symbol: str, reason: str) -> None:
    self._log_simple(TraceEventType.SYMBOL_SKIPPED, f"Skipped {symbol}", {"symbol": symbol, "reason": reason})

  def log_deferral(self, symbol: str) -> None:
    self._log_simple(TraceEventType.SYMBOL_DEFERRED, f"Deferred {symbol}", {"symbol": symbol})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def events_of(self, evt_type: TraceEventType) -> List[TraceEvent]:
    return [e for e in self._events if e.type == evt_type]

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
