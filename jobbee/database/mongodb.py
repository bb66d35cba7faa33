# jobbee/database/mongodb.py

from pymongo import MongoClient, ASCENDING, DESCENDING, GEOSPHERE, TEXT
from pymongo.errors import ConnectionFailure
from jobbee.config import Config
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    def __init__(self, uri: str = None, database_name: str = None):
        self.uri = uri or Config.MONGODB_URI
        self.database_name = database_name or Config.DATABASE_NAME
        self.client = None
        self.db = None
        self.connect()

    def connect(self):
        """Establish connection to MongoDB"""
        try:
            self.client = MongoClient(self.uri, tz_aware=True)
            self.db = self.client[self.database_name]

            # Test connection
            self.client.admin.command('ping')
            logger.info(f"Successfully connected to MongoDB database '{self.database_name}'")

            self._create_indexes()

        except ConnectionFailure as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise

    def _create_indexes(self):
        """Create the indexes the API relies on (unique emails, text and geo search)"""
        self.users.create_index([("email", ASCENDING)], unique=True)
        self.users.create_index([("resetPasswordToken", ASCENDING)], sparse=True)

        # $text needs exactly one text index per collection
        self.jobs.create_index([("title", TEXT), ("description", TEXT)], name="job_text")
        self.jobs.create_index([("location.coordinates", GEOSPHERE)])
        self.jobs.create_index([("postingDate", DESCENDING)])
        self.jobs.create_index([("user", ASCENDING)])
        self.jobs.create_index([("applicantsApplied.id", ASCENDING)])

    @property
    def users(self):
        return self.db[Config.USERS_COLLECTION]

    @property
    def jobs(self):
        return self.db[Config.JOBS_COLLECTION]

    def close(self):
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
