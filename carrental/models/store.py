import logging
import time
from functools import wraps

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.errors import AutoReconnect, DuplicateKeyError, PyMongoError

from carrental.exceptions import DatabaseUnavailableError

logger = logging.getLogger(__name__)

RETRY_BACKOFF = 0.1  # seconds, multiplied by the attempt number


def _oid(value):
    """Parse a hex id into an ObjectId; None when it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def _out(doc: dict | None) -> dict | None:
    """Copy a raw document with its ObjectId rendered as a hex string."""
    if doc is None:
        return None
    d = dict(doc)
    d["_id"] = str(d["_id"])
    return d


def _reads(fn):
    """Retry idempotent reads on AutoReconnect; map driver errors to 502."""

    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        attempt = 0
        while True:
            try:
                return fn(self, *args, **kwargs)
            except AutoReconnect as e:
                if attempt >= self.read_retries:
                    logger.error("Store.%s failed after %d retries: %s", fn.__name__, attempt, e)
                    raise DatabaseUnavailableError() from e
                attempt += 1
                logger.warning("Store.%s lost connection (%s); retry %d/%d",
                               fn.__name__, e, attempt, self.read_retries)
                time.sleep(RETRY_BACKOFF * attempt)
            except PyMongoError as e:
                logger.error("Store.%s failed: %s", fn.__name__, e)
                raise DatabaseUnavailableError() from e

    return wrapper


def _writes(fn):
    """Writes never retry. Duplicate keys propagate so callers can map them."""

    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error("Store.%s failed: %s", fn.__name__, e)
            raise DatabaseUnavailableError() from e

    return wrapper


class Store:
    """
    Thin access layer over the users, cars and rentals collections.
    Every method returns plain dicts with `_id` as a hex string; references
    between documents (`user_id`, `car_id`) are stored as hex strings too.
    """

    def __init__(self, db, read_retries: int = 2):
        self.db = db
        self.users = db["users"]
        self.cars = db["cars"]
        self.rentals = db["rentals"]
        self.read_retries = read_retries

    @classmethod
    def connect(cls, settings) -> "Store":
        """Open a MongoClient with explicit timeouts and ensure indexes."""
        logger.info("Connecting to MongoDB database %r ...", settings.mongodb_db)
        client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=settings.db_timeout_ms,
            connectTimeoutMS=settings.db_timeout_ms,
            socketTimeoutMS=settings.db_timeout_ms,
        )
        store = cls(client[settings.mongodb_db], read_retries=settings.db_read_retries)
        try:
            store.ensure_indexes()
        except PyMongoError as e:
            # The app still starts; requests fail with 502 until the DB is reachable.
            logger.warning("Could not ensure indexes (%s)", e)
        return store

    def ensure_indexes(self):
        self.users.create_index([("email", ASCENDING)], unique=True)
        self.rentals.create_index([("car_id", ASCENDING), ("start_date", ASCENDING)])
        self.rentals.create_index([("user_id", ASCENDING)])

    def close(self):
        self.db.client.close()
        logger.info("MongoDB connection closed")

    @_writes
    def clear(self):
        """Remove every user, car and rental."""
        for coll in (self.users, self.cars, self.rentals):
            coll.delete_many({})

    # ---------- Users ----------
    @_reads
    def find_user_by_email(self, email: str) -> dict | None:
        return _out(self.users.find_one({"email": email}))

    def email_exists(self, email: str) -> bool:
        return self.find_user_by_email(email) is not None

    @_reads
    def get_user(self, user_id) -> dict | None:
        oid = _oid(user_id)
        if oid is None:
            return None
        return _out(self.users.find_one({"_id": oid}))

    @_reads
    def get_users(self, user_ids) -> dict:
        """Return {hex id: user} for every id that exists."""
        oids = [o for o in (_oid(u) for u in set(user_ids)) if o is not None]
        if not oids:
            return {}
        return {str(d["_id"]): _out(d) for d in self.users.find({"_id": {"$in": oids}})}

    @_reads
    def list_users(self) -> list:
        return [_out(d) for d in self.users.find().sort("name", ASCENDING)]

    @_writes
    def create_user(self, doc: dict) -> str:
        return str(self.users.insert_one(dict(doc)).inserted_id)

    @_writes
    def update_user(self, user_id, updates: dict) -> dict | None:
        oid = _oid(user_id)
        if oid is None:
            return None
        return _out(self.users.find_one_and_update(
            {"_id": oid}, {"$set": updates}, return_document=ReturnDocument.AFTER))

    @_writes
    def delete_user(self, user_id) -> bool:
        oid = _oid(user_id)
        if oid is None:
            return False
        return self.users.delete_one({"_id": oid}).deleted_count == 1

    # ---------- Cars ----------
    @_writes
    def create_car(self, doc: dict) -> str:
        return str(self.cars.insert_one(dict(doc)).inserted_id)

    @_reads
    def get_car(self, car_id) -> dict | None:
        oid = _oid(car_id)
        if oid is None:
            return None
        return _out(self.cars.find_one({"_id": oid}))

    @_reads
    def get_cars(self, car_ids) -> dict:
        """Return {hex id: car} for every id that exists."""
        oids = [o for o in (_oid(c) for c in set(car_ids)) if o is not None]
        if not oids:
            return {}
        return {str(d["_id"]): _out(d) for d in self.cars.find({"_id": {"$in": oids}})}

    @_reads
    def list_cars(self) -> list:
        return [_out(d) for d in self.cars.find()]

    @_writes
    def update_car(self, car_id, updates: dict) -> dict | None:
        oid = _oid(car_id)
        if oid is None:
            return None
        return _out(self.cars.find_one_and_update(
            {"_id": oid}, {"$set": updates}, return_document=ReturnDocument.AFTER))

    @_writes
    def delete_car(self, car_id) -> bool:
        oid = _oid(car_id)
        if oid is None:
            return False
        return self.cars.delete_one({"_id": oid}).deleted_count == 1

    # ---------- Rentals ----------
    @_writes
    def create_rental(self, doc: dict) -> str:
        return str(self.rentals.insert_one(dict(doc)).inserted_id)

    @_reads
    def get_rental(self, rental_id) -> dict | None:
        oid = _oid(rental_id)
        if oid is None:
            return None
        return _out(self.rentals.find_one({"_id": oid}))

    @_reads
    def list_rentals(self, user_id: str | None = None) -> list:
        """All rentals, or only those owned by `user_id`; newest start first."""
        query = {} if user_id is None else {"user_id": str(user_id)}
        return [_out(d) for d in self.rentals.find(query).sort("start_date", DESCENDING)]

    @_reads
    def rentals_for_car(self, car_id: str, statuses) -> list:
        query = {"car_id": str(car_id), "rental_status": {"$in": list(statuses)}}
        return [_out(d) for d in self.rentals.find(query)]

    @_writes
    def transition_rental(self, rental_id, from_status: str, updates: dict) -> dict | None:
        """
        Apply `updates` only while the rental is still in `from_status`.
        Returns the updated rental, or None when nothing matched.
        """
        oid = _oid(rental_id)
        if oid is None:
            return None
        return _out(self.rentals.find_one_and_update(
            {"_id": oid, "rental_status": from_status},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        ))

    @_writes
    def delete_rental(self, rental_id) -> bool:
        oid = _oid(rental_id)
        if oid is None:
            return False
        return self.rentals.delete_one({"_id": oid}).deleted_count == 1
