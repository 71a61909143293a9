"""
Firebase Admin credentials loading.

FIREBASE_CREDENTIALS = content of the service-account JSON (inline, minified on one line),
so the .json file never has to live inside the project.
"""

import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)


def get_firebase_credentials(json_str: str) -> Optional[credentials.Certificate]:
    """
    Build credentials.Certificate from the inline service-account JSON.

    Returns:
        credentials.Certificate, or None when not configured/invalid
        (callers then fall back to application default credentials).
    """
    if not json_str:
        return None

    try:
        data = json.loads(json_str)
        return credentials.Certificate(data)
    except (json.JSONDecodeError, ValueError) as e:
        logger.error(f"FIREBASE_CREDENTIALS: invalid service account JSON - {e}")
        return None


def init_firebase_app(json_str: str = "") -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    cred = get_firebase_credentials(json_str)
    if cred is not None:
        app = firebase_admin.initialize_app(cred)
        logger.info("Firebase Admin SDK initialized (credentials from env)")
    else:
        app = firebase_admin.initialize_app()
        logger.info("Firebase Admin SDK initialized with default credentials")
    return app
