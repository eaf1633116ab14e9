from .manager import DatasetError, DatasetManager, records_from_json

__all__ = ["DatasetError", "DatasetManager", "records_from_json"]
