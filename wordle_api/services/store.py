"""
Game Store

Thin persistence adapter over a MongoDB database. Each method is a single
store call (or a single multi-document delete); there is no locking, so
concurrent read-modify-write sequences resolve last-writer-wins.
"""

import datetime
from typing import Any, Dict, List, Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.game import Game, HistoryEntry
from ..models.link import LinkedAccount, LinkPin


class GameStore:
    """
    Collections:
    - games: one document per identity (``_id`` is the identity)
    - game_history: append-only completed game snapshots
    - link_pins: pending PINs (``_id`` is the code)
    - linked_accounts: bindings (``_id`` is the secondary identity)
    - words: optional vocabulary (``word`` field)
    """

    def __init__(self, db: Database, client: Optional[MongoClient] = None):
        self.client = client
        self.db = db
        self.games_collection = db.games
        self.history_collection = db.game_history
        self.pins_collection = db.link_pins
        self.links_collection = db.linked_accounts
        self.words_collection = db.words

    def ensure_indexes(self):
        self.history_collection.create_index([("userId", ASCENDING), ("completedAt", DESCENDING)])
        self.pins_collection.create_index("userId")
        self.pins_collection.create_index("createdAt")
        self.links_collection.create_index("primaryUserId")

    def ping(self) -> bool:
        """True if the database answers."""
        try:
            self.db.command('ping')
            return True
        except Exception:
            return False

    # Games

    def get_game(self, user_id: str) -> Optional[Game]:
        doc = self.games_collection.find_one({"_id": user_id})
        return Game.from_document(doc) if doc else None

    def save_game(self, game: Game):
        self.games_collection.replace_one({"_id": game.user_id}, game.to_document(), upsert=True)

    def delete_game(self, user_id: str) -> bool:
        result = self.games_collection.delete_one({"_id": user_id})
        return result.deleted_count > 0

    # History

    def add_history_entry(self, entry: HistoryEntry):
        self.history_collection.insert_one(entry.to_document())

    @staticmethod
    def _history_query(user_id: str, is_won: Optional[bool] = None,
                       completed_from: Optional[datetime.datetime] = None,
                       completed_before: Optional[datetime.datetime] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {"userId": user_id}
        if is_won is not None:
            query["isWon"] = is_won
        completed: Dict[str, Any] = {}
        if completed_from is not None:
            completed["$gte"] = completed_from
        if completed_before is not None:
            completed["$lt"] = completed_before
        if completed:
            query["completedAt"] = completed
        return query

    def find_history(self, user_id: str, is_won: Optional[bool] = None,
                     completed_from: Optional[datetime.datetime] = None,
                     completed_before: Optional[datetime.datetime] = None,
                     sort_field: str = "completedAt", descending: bool = True,
                     skip: int = 0, limit: int = 0) -> List[HistoryEntry]:
        query = self._history_query(user_id, is_won, completed_from, completed_before)
        cursor = self.history_collection.find(query).sort(
            [(sort_field, DESCENDING if descending else ASCENDING), ("_id", DESCENDING if descending else ASCENDING)]
        )
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [HistoryEntry.from_document(doc) for doc in cursor]

    def count_history(self, user_id: str, is_won: Optional[bool] = None,
                      completed_from: Optional[datetime.datetime] = None,
                      completed_before: Optional[datetime.datetime] = None) -> int:
        query = self._history_query(user_id, is_won, completed_from, completed_before)
        return self.history_collection.count_documents(query)

    # PINs

    def get_pin(self, code: str) -> Optional[LinkPin]:
        doc = self.pins_collection.find_one({"_id": code})
        return LinkPin.from_document(doc) if doc else None

    def pin_exists(self, code: str) -> bool:
        return self.pins_collection.count_documents({"_id": code}, limit=1) > 0

    def save_pin(self, pin: LinkPin):
        self.pins_collection.replace_one({"_id": pin.code}, pin.to_document(), upsert=True)

    def delete_pin(self, code: str) -> bool:
        result = self.pins_collection.delete_one({"_id": code})
        return result.deleted_count > 0

    def has_pin_for_owner(self, owner_id: str) -> bool:
        return self.pins_collection.count_documents({"userId": owner_id}, limit=1) > 0

    def delete_pins_for_owner(self, owner_id: str) -> int:
        return self.pins_collection.delete_many({"userId": owner_id}).deleted_count

    def delete_pins_created_before(self, cutoff: datetime.datetime) -> int:
        return self.pins_collection.delete_many({"createdAt": {"$lt": cutoff}}).deleted_count

    # Linked accounts

    def get_link(self, secondary_id: str) -> Optional[LinkedAccount]:
        doc = self.links_collection.find_one({"_id": secondary_id})
        return LinkedAccount.from_document(doc) if doc else None

    def find_links_for_primary(self, primary_id: str) -> List[LinkedAccount]:
        cursor = self.links_collection.find({"primaryUserId": primary_id}).sort("linkedAt", DESCENDING)
        return [LinkedAccount.from_document(doc) for doc in cursor]

    def upsert_link(self, link: LinkedAccount):
        self.links_collection.replace_one({"_id": link.secondary_id}, link.to_document(), upsert=True)

    def delete_links_for_primary(self, primary_id: str) -> int:
        return self.links_collection.delete_many({"primaryUserId": primary_id}).deleted_count

    # Vocabulary

    def load_words(self) -> List[str]:
        return [doc.get("word", "") for doc in self.words_collection.find({}, {"word": 1})]

    def close_connection(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()


# Global store instance
_store = None


def get_store() -> Optional[GameStore]:
    """Get the global store instance."""
    return _store


def set_store(store: Optional[GameStore]) -> Optional[GameStore]:
    """Install an already-built store (used by create_app and tests)."""
    global _store
    _store = store
    return _store


def initialize_store(mongo_uri: str, db_name: str) -> Optional[GameStore]:
    """Connect to MongoDB and initialize the global store instance."""
    global _store
    client = MongoClient(mongo_uri, server_api=ServerApi('1'))
    try:
        client.admin.command('ping')
        print("Successfully connected to MongoDB!")
    except Exception as e:
        print(f"MongoDB connection error: {e}")
        client.close()
        return None

    _store = GameStore(client[db_name], client)
    _store.ensure_indexes()
    return _store
