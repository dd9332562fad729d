import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, PyMongoError
from pymongo.monitoring import TopologyListener


class _ReachabilityListener(TopologyListener):
    """Feeds the driver's topology changes back into the selector.

    Runs on pymongo's monitor threads, outside any Flask app context.
    """

    def __init__(self, selector):
        self.selector = selector

    def opened(self, event):
        pass

    def description_changed(self, event):
        self.selector._set_reachable(event.new_description.has_writable_server())

    def closed(self, event):
        self.selector._set_reachable(False)


class StorageSelector:
    """Tracks whether the MongoDB store can take reads and writes.

    The flag is set once by the startup ping and afterwards only by driver
    topology events; nothing here polls or waits for the server.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[MongoClient] = None
        self.database_name: Optional[str] = None
        self._reachable = False

    @property
    def reachable(self) -> bool:
        return self.client is not None and self._reachable

    def init_app(self, app):
        self.logger = app.logger
        uri = app.config.get('MONGODB_URI')
        if not uri:
            self.logger.info("[mongo] no connection string configured, using memory storage")
            return
        self.connect(
            uri,
            app.config.get('MONGODB_DB_NAME', 'keyboard-challenge'),
            timeout_ms=app.config.get('MONGODB_TIMEOUT_MS', 5000),
        )

    def connect(self, uri: str, database_name: str, timeout_ms: int = 5000) -> bool:
        """Open the client and ping once. Returns the resulting reachability."""
        try:
            client = MongoClient(
                uri,
                serverSelectionTimeoutMS=timeout_ms,
                tz_aware=True,
                event_listeners=[_ReachabilityListener(self)],
            )
        except (ConfigurationError, ValueError) as e:
            self.logger.error(f"[mongo] invalid connection settings: {e}")
            return False

        self.client = client
        self.database_name = database_name
        try:
            client.admin.command('ping')
        except PyMongoError as e:
            # covers auth failures too; the client is dropped so topology events cannot revive it
            self.logger.error(f"[mongo] connection failed, falling back to memory storage: {e}")
            self.close()
            return False

        self._set_reachable(True)
        self.logger.info(f"[mongo] connected db={database_name}")
        return True

    def attach(self, client, database_name: str, reachable: bool = True) -> None:
        """Install an already-built client, e.g. a mongomock one."""
        self.client = client
        self.database_name = database_name
        self._reachable = reachable

    def collection(self, name: str):
        if self.client is None:
            raise RuntimeError('MongoDB client is not configured')
        return self.client[self.database_name][name]

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
        self._reachable = False

    def _set_reachable(self, value: bool) -> None:
        if value == self._reachable:
            return
        self._reachable = value
        if value:
            self.logger.info("[mongo] store reachable, routing scores to MongoDB")
        else:
            self.logger.warning("[mongo] store unreachable, routing scores to memory")
