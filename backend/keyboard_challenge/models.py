import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from keyboard_challenge.clock import isoformat, utcnow
from keyboard_challenge.errors import InvalidFieldError, MissingFieldsError

REQUIRED_FIELDS = ['name', 'time']
DEFAULT_ACCURACY = 100


def _number(value, field_name):
    if isinstance(value, bool):
        raise InvalidFieldError(field_name, value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidFieldError(field_name, value)
    else:
        raise InvalidFieldError(field_name, value)
    if not math.isfinite(number):
        raise InvalidFieldError(field_name, value)
    return number


@dataclass
class ScoreRecord:
    name: str
    time: float
    accuracy: Any = DEFAULT_ACCURACY
    date: datetime = field(default_factory=utcnow)
    id: Optional[Any] = None

    @classmethod
    def from_payload(cls, payload, name_max_length=20):
        """Build an unsaved record from a submission body.

        `name` and `time` must be present and truthy; a missing or zero
        `accuracy` falls back to 100.
        """
        payload = payload if isinstance(payload, dict) else {}
        name = payload.get('name')
        elapsed = payload.get('time')
        if not name or not elapsed:
            raise MissingFieldsError(REQUIRED_FIELDS, payload)

        accuracy = payload.get('accuracy')
        accuracy = _number(accuracy, 'accuracy') if accuracy else DEFAULT_ACCURACY
        return cls(
            name=str(name)[:name_max_length],
            time=float(_number(elapsed, 'time')),
            accuracy=accuracy,
        )

    @classmethod
    def from_document(cls, doc):
        return cls(
            id=str(doc['_id']),
            name=doc['name'],
            time=doc['time'],
            accuracy=doc.get('accuracy', DEFAULT_ACCURACY),
            date=doc['date'],
        )

    def with_timestamp_id(self) -> 'ScoreRecord':
        self.id = int(self.date.timestamp() * 1000)
        return self

    def to_document(self):
        return {
            'name': self.name,
            'time': self.time,
            'accuracy': self.accuracy,
            'date': self.date,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'time': self.time,
            'accuracy': self.accuracy,
            'date': isoformat(self.date),
        }


@dataclass
class Submission:
    record: ScoreRecord
    storage: str
    rank: Optional[int] = None
    total_players: Optional[int] = None

    def to_dict(self):
        data = {
            'success': True,
            'message': 'Score recorded',
            'data': self.record.to_dict(),
            'storage': self.storage,
        }
        if self.rank is not None:
            data['rank'] = self.rank
        if self.total_players is not None:
            data['totalPlayers'] = self.total_players
        return data


@dataclass
class LeaderboardPage:
    records: List[ScoreRecord]
    count: int
    storage: str

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_dict(self):
        return {
            'leaderboard': [r.to_dict() for r in self.records],
            'count': self.count,
            'storage': self.storage,
            'message': 'No records yet, be the first challenger!' if self.is_empty else 'Leaderboard loaded',
        }
