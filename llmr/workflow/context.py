""" Execution trace for workflow runs. """
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ExecutionTrace:
    records: List[Dict[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, node_id: str, kind: str, name: str, **details: Any) -> None:
        entry = {"timestamp": time.time(), "node_id": node_id, "kind": kind, "name": name, **details}
        with self._lock:
            self.records.append(entry)

    @property
    def visited(self) -> List[str]:
        """ Node ids in the order they were entered. """
        return [r["node_id"] for r in self.records]
