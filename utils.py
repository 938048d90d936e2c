"""
Utility functions for lazy sequences

This module provides helper functions for measuring performance and for
checking how much of a lazy sequence has actually been evaluated.
"""

import time
import gc
import logging
import tracemalloc
from typing import Any, Callable, Dict, List

from lazy import LazySequence, empty

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Measured terminal operations, oldest first
_operation_log: List[Dict[str, Any]] = []


class InvocationCounter:
    """Wraps a callback and counts how many times it is invoked."""

    def __init__(self, func: Callable):
        self.func = func
        self.calls = 0
        self.arguments: List[tuple] = []

    def __call__(self, *args):
        self.calls += 1
        self.arguments.append(args)
        return self.func(*args)

    def reset(self):
        self.calls = 0
        self.arguments = []


def evaluation_depth(seq: LazySequence) -> int:
    """Count the nodes whose tail is already cached, without forcing anything"""
    depth = 0
    while seq is not empty() and seq._tail.resolved:
        depth += 1
        seq = seq._tail.value
    return depth


def validate_lazy_evaluation(seq: LazySequence) -> bool:
    """True if nothing past the first node has been evaluated yet"""
    if not isinstance(seq, LazySequence) or seq is empty():
        return False
    return not seq._tail.resolved


def _operation_record(name: str, seq: LazySequence, depth_before: int,
                      start_time: float) -> Dict[str, Any]:
    current, peak = tracemalloc.get_traced_memory()
    record = {
        "operation": name,
        "execution_time_ms": (time.perf_counter() - start_time) * 1000,
        "memory_usage_mb": peak / 1024 / 1024,
        "nodes_evaluated": evaluation_depth(seq) - depth_before,
        "timestamp": time.time()
    }
    _operation_log.append(record)
    return record


def measure_operation(seq: LazySequence, operation: str, *args, label: str = None) -> Dict[str, Any]:
    """
    Run a terminal operation on seq and report the work it forced.

    The record holds wall time, peak traced memory and nodes_evaluated:
    how many more nodes of seq have a cached tail than before the call.
    A second run over an already walked prefix reports zero new nodes.
    """
    name = label or operation
    depth_before = evaluation_depth(seq)

    tracemalloc.start()
    gc.collect()
    start_time = time.perf_counter()

    try:
        result = getattr(seq, operation)(*args)
        record = _operation_record(name, seq, depth_before, start_time)
        record.update(success=True, result=result)
        logger.info("%s evaluated %d nodes in %.2f ms",
                    name, record["nodes_evaluated"], record["execution_time_ms"])
        return record

    except Exception as e:
        record = _operation_record(name, seq, depth_before, start_time)
        record.update(success=False, error=str(e))
        logger.warning("%s failed after %.2f ms: %s", name, record["execution_time_ms"], e)
        raise

    finally:
        tracemalloc.stop()


def get_operation_summary() -> Dict[str, Any]:
    """Totals over every measured operation"""
    count = len(_operation_log)
    total_time_ms = sum(r["execution_time_ms"] for r in _operation_log)
    return {
        "total_operations": count,
        "failed_operations": sum(1 for r in _operation_log if not r["success"]),
        "total_time_ms": total_time_ms,
        "total_nodes_evaluated": sum(r["nodes_evaluated"] for r in _operation_log),
        "avg_time_ms": total_time_ms / count if count else 0.0
    }


def clear_operation_log():
    """Forget every measured operation"""
    _operation_log.clear()
