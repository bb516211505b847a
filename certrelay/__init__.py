"""certrelay - civil-status certificate relay.

Classifies uploaded certificates with a document-understanding model,
extracts their fields and materializes results in Google Drive.
"""

__version__ = "1.0.0"
