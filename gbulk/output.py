"""
Output module for gbulk.

Machine-readable output for the --json flag: newline-delimited JSON
on stdout, one object per item.

Usage:
    from gbulk.output import emit, emit_summary

    emit(summary.outcomes)
    emit_summary(summary)
"""

import json
import sys
from typing import Any, Iterable

from .domain.operation import OperationSummary


def emit(items: Iterable[Any], stream=None) -> None:
    """Emit items as JSONL."""
    stream = stream or sys.stdout
    for item in items:
        if hasattr(item, 'to_dict'):
            data = item.to_dict()
        elif isinstance(item, dict):
            data = item
        else:
            data = {'value': str(item)}

        print(json.dumps(data, ensure_ascii=False), file=stream, flush=True)


def emit_summary(summary: OperationSummary, stream=None) -> None:
    """Emit every outcome followed by the summary object."""
    emit(summary.outcomes, stream)
    emit([summary.to_dict()], stream)
