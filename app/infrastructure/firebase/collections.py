"""Firestore collection names (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when the first document is written. Names match those used by the web client
so both read and write the same documents.
"""

COLLECTION_TASKS = "tasks"
COLLECTION_USERS = "users"
COLLECTION_DEPARTMENTS = "departments"
COLLECTION_NOTIFICATIONS = "notifications"
COLLECTION_TASK_TEMPLATES = "taskTemplates"
