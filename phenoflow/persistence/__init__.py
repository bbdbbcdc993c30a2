"""Remote content store backends for phenotype repositories."""

from phenoflow.persistence.base import ContentStore
from phenoflow.persistence.factory import (
    close_content_store,
    get_content_store,
    set_content_store,
)

__all__ = [
    "ContentStore",
    "close_content_store",
    "get_content_store",
    "set_content_store",
]
