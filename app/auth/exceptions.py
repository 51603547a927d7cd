class CredentialError(Exception):
    """Raised when the active credential cannot sign or authenticate a request."""
