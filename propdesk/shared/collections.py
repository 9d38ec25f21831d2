"""Store collection names and document paths (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Use these helpers so paths stay the
same between this service and the web client.

Layout:
    properties/{id}
    prospects/{id}
    users/{uid}
    {entityCollection}/{entityId}/files/{slotId}
    {entityCollection}/{entityId}/media/{mediaId}
"""

COLLECTION_USERS = "users"
SUBCOLLECTION_FILES = "files"
SUBCOLLECTION_MEDIA = "media"


def entity_path(collection: str, entity_id: str) -> str:
    return f"{collection}/{entity_id}"


def files_collection(collection: str, entity_id: str) -> str:
    return f"{collection}/{entity_id}/{SUBCOLLECTION_FILES}"


def file_path(collection: str, entity_id: str, slot_id: str) -> str:
    return f"{files_collection(collection, entity_id)}/{slot_id}"


def media_collection(collection: str, entity_id: str) -> str:
    return f"{collection}/{entity_id}/{SUBCOLLECTION_MEDIA}"


def media_path(collection: str, entity_id: str, media_id: str) -> str:
    return f"{media_collection(collection, entity_id)}/{media_id}"


def user_path(uid: str) -> str:
    return f"{COLLECTION_USERS}/{uid}"
