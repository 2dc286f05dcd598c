"""Aggregated outcome of best-effort operations"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class OperationReport:
    """Counters and suppressed failures collected while an operation runs

    Inner steps that are allowed to fail record the failure here and keep
    going. Only the fatal error classes are raised.
    """

    operation: str
    counts: Dict[str, int] = field(default_factory=dict)
    failures: List[Dict[str, str]] = field(default_factory=list)

    def increment(self, key: str, amount: int = 1) -> None:
        self.counts[key] = self.counts.get(key, 0) + amount

    def add_failure(self, target: str, error: Any) -> None:
        self.failures.append({'target': str(target), 'error': str(error)})

    def count(self, key: str) -> int:
        return self.counts.get(key, 0)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def mutations(self) -> int:
        """Total number of rows, files and directories removed"""
        return sum(self.counts.get(k, 0) for k in (
            'deleted_rows', 'deleted_files', 'deleted_directories'
        ))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'operation': self.operation,
            'counts': dict(self.counts),
            'failures': list(self.failures),
        }
