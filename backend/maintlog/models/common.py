"""
Shared response envelopes.
"""

from typing import Generic, List, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ItemList(BaseModel, Generic[T]):
    """List response: ``{"items": [...], "count": n}``."""
    items: List[T]
    count: int

    @classmethod
    def of(cls, items: List[T]) -> "ItemList[T]":
        return cls(items=items, count=len(items))


class MessageResponse(BaseModel):
    message: str
