"""MongoDB-backed leaderboard."""

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from keyboard_challenge.errors import StoreError
from keyboard_challenge.models import LeaderboardPage, ScoreRecord, Submission


class MongoLeaderboardStore:
    name = 'mongodb'

    def __init__(self, selector, collection_name: str = 'scores'):
        self.selector = selector
        self.collection_name = collection_name

    @property
    def collection(self):
        return self.selector.collection(self.collection_name)

    def ensure_indexes(self) -> None:
        self.collection.create_index([('time', ASCENDING)])

    def submit(self, record: ScoreRecord) -> Submission:
        doc = record.to_document()
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            raise StoreError('Failed to submit score', e)
        record.id = str(result.inserted_id)
        return Submission(record=record, storage=self.name)

    def read(self, limit: int) -> LeaderboardPage:
        try:
            cursor = self.collection.find({}).sort('time', ASCENDING).limit(int(limit))
            records = [ScoreRecord.from_document(doc) for doc in cursor]
            count = self.collection.count_documents({})
        except PyMongoError as e:
            raise StoreError('Failed to load leaderboard', e)
        return LeaderboardPage(records=records, count=count, storage=self.name)

    def clear(self) -> int:
        try:
            result = self.collection.delete_many({})
        except PyMongoError as e:
            raise StoreError('Failed to clear leaderboard', e)
        return result.deleted_count
