"""Authentication module for SharePoint Uploader (spupload)."""

import msal
import requests

from spupload.core.config import SCOPES, UploadConfig
from spupload.core.errors import AuthError


class SharePointAuth:
    """Acquires app-only Microsoft Graph tokens with the client credentials flow."""

    def __init__(self, config: UploadConfig):
        """Initialize authentication from a validated configuration."""
        self.config = config
        self.access_token = None
        self._app = None

    def _get_app(self):
        if self._app is None:
            self._app = msal.ConfidentialClientApplication(
                client_id=self.config.client_id,
                authority=self.config.authority,
                client_credential=self.config.client_secret,
            )
        return self._app

    def get_access_token(self):
        """
        Acquires an app-only access token using the client credentials flow.
        There is no user interaction; the token is kept for the whole run.

        Raises:
            AuthError: if the identity platform is unreachable or returns no token.
        """
        if self.access_token:
            return self.access_token

        try:
            result = self._get_app().acquire_token_for_client(scopes=SCOPES)
        except (ValueError, requests.exceptions.RequestException) as e:
            # msal raises ValueError for malformed authorities and unknown tenants
            raise AuthError(f"Failed to acquire access token: {e}")

        if result and "access_token" in result:
            self.access_token = result["access_token"]
            return self.access_token

        result = result or {}
        description = result.get("error_description") or result.get("error") or "no token returned"
        raise AuthError(f"Failed to acquire access token: {description}", raw_response=result)

    def get_headers(self):
        """Constructs the default headers for API requests."""
        token = self.get_access_token()
        return {"Authorization": f"Bearer {token}"}
