"""
Owner scoping for queries.

`owner_filter` is the ONLY place a set of resolved owner ids turns into a
Mongo clause. The ids must come from `access.permissions`.

    EMPTY set  -> no owner clause at all (unrestricted; ADMIN bulk listing)
    one id     -> {"user_id": id}
    several    -> {"user_id": {"$in": [...]}}

An empty set never means "match nothing".
"""

from __future__ import annotations

from typing import AbstractSet, Any

from bson import ObjectId


def owner_filter(owner_ids: AbstractSet[str]) -> dict[str, Any]:
    if not owner_ids:
        return {}
    if len(owner_ids) == 1:
        (only,) = owner_ids
        return {"user_id": only}
    return {"user_id": {"$in": sorted(owner_ids)}}


def oid_to_str(doc: dict[str, Any]) -> dict[str, Any]:
    if "_id" in doc and isinstance(doc["_id"], ObjectId):
        doc["id"] = str(doc["_id"])
        del doc["_id"]
    return doc


def id_clause(doc_id: str) -> dict[str, Any]:
    """Match `_id` whether it was stored as an ObjectId or as a plain string."""
    if ObjectId.is_valid(doc_id):
        return {"_id": {"$in": [ObjectId(doc_id), doc_id]}}
    return {"_id": doc_id}
