"""
Tunebox - Domain exceptions

Every error the services raise on purpose derives from TuneboxError and
carries the HTTP status it maps to. main.py renders them as
{"success": false, "message": ...}.
"""


class TuneboxError(Exception):
    """Base exception for Tunebox"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self):
        return {
            "success": False,
            "message": self.message
        }


class ValidationError(TuneboxError):
    """Missing fields/files or oversized payloads"""
    status_code = 400


class AuthenticationError(TuneboxError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class TrackNotFoundError(TuneboxError):
    status_code = 404

    def __init__(self, track_id: str):
        self.track_id = track_id
        super().__init__("Song not found")


class LocalStorageError(TuneboxError):
    """Primary file store failed. Fatal to uploads."""
    status_code = 500


class BackupStorageError(TuneboxError):
    """Object storage backup failed. Callers degrade instead of failing."""
    status_code = 500
