import logging

from flask import current_app

from keyboard_challenge.models import LeaderboardPage, ScoreRecord, Submission


class LeaderboardService:
    """Routes score submissions and leaderboard reads to the active store.

    The store is chosen once per call from the selector's current
    reachability; the two stores are never merged or synchronised.
    """

    def __init__(self, selector, persistent, memory, name_max_length=20,
                 default_limit=20, max_limit=50, logger=None):
        self.selector = selector
        self.persistent = persistent
        self.memory = memory
        self.name_max_length = name_max_length
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config, selector, persistent, memory, logger=None):
        return cls(
            selector,
            persistent,
            memory,
            name_max_length=config.get('NAME_MAX_LENGTH', 20),
            default_limit=config.get('LEADERBOARD_DEFAULT_LIMIT', 20),
            max_limit=config.get('LEADERBOARD_MAX_LIMIT', 50),
            logger=logger,
        )

    def active_store(self):
        return self.persistent if self.selector.reachable else self.memory

    @property
    def storage(self) -> str:
        return self.active_store().name

    def clamp_limit(self, raw=None) -> int:
        try:
            limit = int(raw) if raw is not None else self.default_limit
        except (TypeError, ValueError):
            limit = self.default_limit
        return max(1, min(limit, self.max_limit))

    def submit(self, payload) -> Submission:
        record = ScoreRecord.from_payload(payload, self.name_max_length)
        submission = self.active_store().submit(record)
        self.logger.info(
            f"[score] stored name={record.name!r} time={record.time} storage={submission.storage} rank={submission.rank}"
        )
        return submission

    def read(self, limit=None) -> LeaderboardPage:
        page = self.active_store().read(self.clamp_limit(limit))
        self.logger.info(f"[leaderboard] read {len(page.records)}/{page.count} storage={page.storage}")
        return page

    def clear(self) -> str:
        store = self.active_store()
        removed = store.clear()
        self.logger.warning(f"[leaderboard] cleared {removed} records storage={store.name}")
        return store.name


def get_leaderboard() -> LeaderboardService:
    return current_app.extensions['leaderboard']
