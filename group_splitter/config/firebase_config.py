"""
Firebase Configuration Module

Initializes the Firebase Admin SDK once and hands out a Firestore client.

Environment:
    FIREBASE_CREDENTIALS: Path to a service account JSON file.
    GOOGLE_APPLICATION_CREDENTIALS: Fallback path if the above is unset.
    FIREBASE_PROJECT_ID: Optional project ID override.

If neither path is set, application default credentials are tried.

Functions:
    get_db: Return the shared Firestore client, or None if unavailable.
"""

import logging
import os

import firebase_admin
from firebase_admin import credentials, firestore


logger = logging.getLogger(__name__)

_db = None


def _load_credentials():
    path = os.environ.get("FIREBASE_CREDENTIALS") or os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if path:
        return credentials.Certificate(path)
    return credentials.ApplicationDefault()


def get_db():
    """
    Get the Firestore client.

    Returns:
        google.cloud.firestore.Client | None: The client, or None if Firebase
            could not be initialized (missing or invalid credentials).
    """
    global _db
    if _db is not None:
        return _db

    try:
        app = firebase_admin.get_app()
    except ValueError:
        options = {}
        project_id = os.environ.get("FIREBASE_PROJECT_ID")
        if project_id:
            options["projectId"] = project_id
        try:
            app = firebase_admin.initialize_app(_load_credentials(), options or None)
        except (ValueError, OSError) as e:
            logger.error("Firebase initialization failed: %s", e)
            return None

    try:
        _db = firestore.client(app)
    except Exception as e:
        logger.error("Could not create Firestore client: %s", e)
        return None

    logger.info("Connected to Firestore project %s", app.project_id)
    return _db
