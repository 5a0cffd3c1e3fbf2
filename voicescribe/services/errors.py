from __future__ import annotations

"""Error taxonomy shared by the upload route and the bot handlers.

Each error carries the HTTP status and the message that may be shown to a
caller. Details of the underlying failure go to the logs only.
"""


class VoicescribeError(Exception):
    status_code: int = 500
    public_message: str = "Internal server error"


class NoFileUploaded(VoicescribeError):
    status_code = 400
    public_message = "No file uploaded"


class ProviderUnavailable(VoicescribeError):
    """Transcription provider has no credential configured."""

    public_message = "ElevenLabs API key not configured"


class NetworkError(VoicescribeError):
    """Remote media could not be fetched."""

    public_message = "Error processing audio file"


class PayloadTooLarge(NetworkError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"remote file exceeds {limit} bytes")
        self.limit = limit


class TranscriptionError(VoicescribeError):
    """Provider call failed: transport, HTTP status, quota or bad payload."""

    public_message = "Error processing audio file"
