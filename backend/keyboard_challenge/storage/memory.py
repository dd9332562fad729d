"""In-process leaderboard used while MongoDB is unreachable."""

import threading
from typing import List

from keyboard_challenge.models import LeaderboardPage, ScoreRecord, Submission


class MemoryLeaderboardStore:
    name = 'memory'

    def __init__(self, cap: int = 50):
        self.cap = int(cap)
        self._records: List[ScoreRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def submit(self, record: ScoreRecord) -> Submission:
        record.with_timestamp_id()
        with self._lock:
            self._records.append(record)
            self._records.sort(key=lambda r: r.time)
            del self._records[self.cap:]
            # 0 when the score missed the cut
            rank = next((i for i, r in enumerate(self._records, start=1) if r is record), 0)
            total = len(self._records)
        return Submission(record=record, storage=self.name, rank=rank, total_players=total)

    def read(self, limit: int) -> LeaderboardPage:
        with self._lock:
            records = self._records[: int(limit)]
            count = len(self._records)
        return LeaderboardPage(records=records, count=count, storage=self.name)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._records)
            self._records = []
        return removed
