"""
Tests for the round TraceLogger.
"""

import json

from autoimpl.tracer import TraceEventType, TraceLogger


def test_nested_phases_link_parents() -> None:
  tracer = TraceLogger()
  outer = tracer.start_phase("Round", "round 1")
  inner = tracer.start_phase("Synthesize")
  tracer.log_artifact("pkg.mod.Calc", "pkg/CalcImpl.py")
  tracer.end_phase()
  tracer.end_phase()

  starts = tracer.events_of(TraceEventType.PHASE_START)
  assert [e.id for e in starts] == [outer, inner]
  assert starts[1].parent_id == outer
  assert tracer.events_of(TraceEventType.ARTIFACT_WRITTEN)[0].parent_id == inner
  assert [e.parent_id for e in tracer.events_of(TraceEventType.PHASE_END)] == [inner, outer]


def test_end_phase_without_start_is_ignored() -> None:
  tracer = TraceLogger()
  tracer.end_phase()

  assert tracer.export() == []


def test_export_is_json_serializable() -> None:
  tracer = TraceLogger()
  tracer.log_skip("pkg.mod.Color", "not an interface")
  tracer.log_deferral("pkg.mod.Pending")

  exported = tracer.export()
  decoded = json.loads(json.dumps(exported))

  assert [e["type"] for e in decoded] == ["symbol_skipped", "symbol_deferred"]
  assert decoded[0]["metadata"] == {"symbol": "pkg.mod.Color", "reason": "not an interface"}
  assert decoded[1]["parent_id"] is None
