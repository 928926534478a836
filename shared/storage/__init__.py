from .kv_store import KVStore
from .image_storage import ImageStorage, get_image_storage

__all__ = ["KVStore", "ImageStorage", "get_image_storage"]
