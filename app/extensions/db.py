from pymongo import ASCENDING, MongoClient


class MongoDB:
    def __init__(self):
        self.client = None
        self.db = None

    def init_app(self, app, client=None):
        db_name = app.config.get("DB_NAME", "ecommerce")

        # a pre-built client (e.g. mongomock in tests) takes precedence over the URI
        self.client = client or MongoClient(app.config["MONGO_URI"])
        self.db = self.client[db_name]
        app.mongo = self.db

        # -------------------------------------------------
        # CREATE INDEXES (runs once on startup)
        # -------------------------------------------------
        self.db.vendors.create_index([("account.username", ASCENDING)], unique=True)
        self.db.products.create_index([("vendor_id", ASCENDING)])
        self.db.announcements.create_index([("vendor_id", ASCENDING)])
        self.db.requests.create_index([("vendor_id", ASCENDING)])
        self.db.requests.create_index([("vendor_id", ASCENDING), ("status", ASCENDING)])

    def get_collection(self, name):
        if self.db is None:
            raise RuntimeError("MongoDB not initialized")
        return self.db[name]


# Export the instances
db = MongoDB()
