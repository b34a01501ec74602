from .blob_store import BlobStore, MemoryBlobStore, FileBlobStore
from .local_storage import LocalStorage, SAVED_RECIPES_KEY, SHOPPING_LIST_KEY, DRAFT_KEY

__all__ = [
    'BlobStore',
    'MemoryBlobStore',
    'FileBlobStore',
    'LocalStorage',
    'SAVED_RECIPES_KEY',
    'SHOPPING_LIST_KEY',
    'DRAFT_KEY'
]
