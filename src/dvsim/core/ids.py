from __future__ import annotations

from typing import Iterable, List


class IdMap:
    """Router label <-> RouterId mapping, ids assigned densely in insertion order."""

    def __init__(self, labels: Iterable[str] = ()) -> None:
        self._s2i: dict[str, int] = {}
        self._i2s: dict[int, str] = {}
        for label in labels:
            self.encode(label)

    def encode(self, label: str) -> int:
        label = str(label)
        if label in self._s2i:
            return self._s2i[label]
        idx = len(self._s2i)
        self._s2i[label] = idx
        self._i2s[idx] = label
        return idx

    def lookup(self, label: str) -> int:
        return self._s2i[str(label)]

    def decode(self, idx: int) -> str:
        return self._i2s[idx]

    def labels(self) -> List[str]:
        return [self._i2s[i] for i in sorted(self._i2s)]

    def __contains__(self, label: object) -> bool:
        return str(label) in self._s2i

    def __len__(self) -> int:
        return len(self._s2i)
