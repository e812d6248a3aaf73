"""Construction of the Firebase Admin application handle."""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials

from eventpush.config import Settings

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "eventpush"


def create_firebase_app(settings: Settings) -> firebase_admin.App:
    """Initialize (or reuse) the named Firebase app described by ``settings``.

    A named app is used instead of the SDK default so the handle can be passed
    around explicitly.
    """

    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    if settings.firebase_credentials_path:
        credential = credentials.Certificate(settings.firebase_credentials_path)
    else:
        credential = credentials.ApplicationDefault()

    options = {}
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    app = firebase_admin.initialize_app(credential, options or None, name=FIREBASE_APP_NAME)
    logger.info("Initialized Firebase app %s", FIREBASE_APP_NAME)
    return app


__all__ = ["FIREBASE_APP_NAME", "create_firebase_app"]
