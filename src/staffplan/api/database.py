from staffplan.storage.base import RecordStore
from staffplan.storage.sql_adapter import DatabaseAdapter, DatabaseConfig
from staffplan.storage.sql_store import SqlRecordStore

# Singletons
_database_adapter: DatabaseAdapter | None = None

def get_database_adapter() -> DatabaseAdapter:
    global _database_adapter
    if not _database_adapter:
        config = DatabaseConfig()
        _database_adapter = DatabaseAdapter(config)
    return _database_adapter

def get_record_store() -> RecordStore:
    adapter = get_database_adapter()
    adapter.connect()
    return SqlRecordStore(adapter)

def close_database_adapter():
    global _database_adapter
    if _database_adapter:
        _database_adapter.close()
        _database_adapter = None
