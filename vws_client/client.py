"""
VWS client for managing image targets in a Vuforia cloud database.

Each operation signs its request synchronously, schedules the HTTP exchange
on a thread pool and returns a ``PendingCall`` right away. The call resolves
exactly once with the operation's response shape.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

from . import builder
from .builder import Credentials, VWSRequest
from .config import load_settings
from .constants import DEFAULT_CONFIG, VWS_URL
from .dispatcher import Dispatcher, PendingCall, ResponseCallback
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VWSClient:
    """
    Client for the Vuforia Web Services target management API.

    Credentials live on the client instance; replacing them with
    ``set_credentials`` affects requests built afterwards only.
    """

    def __init__(self, access_key: str, secret_key: str, base_url: str = VWS_URL, **config):
        """
        Initialize VWS client.

        Args:
            access_key: Server access key
            secret_key: Server secret key
            base_url: Service origin
            **config: Configuration options (connect_timeout, read_timeout,
                max_workers, content_type)
        """
        self.base_url = base_url.rstrip('/')
        self._credentials = Credentials(access_key, secret_key)

        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}

        self._validate_config()

        self.session = requests.Session()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config['max_workers'],
            thread_name_prefix="vws",
        )
        self._dispatcher = Dispatcher(
            self.session,
            self._executor,
            self.base_url,
            (self.config['connect_timeout'], self.config['read_timeout']),
        )

    @classmethod
    def from_env(cls, env_file: Optional[str] = None, **config) -> "VWSClient":
        """Build a client from VWS_* environment variables (see config.load_settings)."""
        settings = load_settings(env_file)
        settings.update(config)
        return cls(**settings)

    def _validate_config(self):
        """Validate client configuration."""
        if not self._credentials.access_key:
            raise ConfigurationError("access_key cannot be empty")

        if not self._credentials.secret_key:
            raise ConfigurationError("secret_key cannot be empty")

        if self.config['connect_timeout'] <= 0 or self.config['read_timeout'] <= 0:
            raise ConfigurationError("timeouts must be positive")

        if self.config['max_workers'] <= 0:
            raise ConfigurationError("max_workers must be positive")

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def set_credentials(self, access_key: str, secret_key: str):
        """Replace the key pair used for requests built from now on."""
        if not access_key or not secret_key:
            raise ConfigurationError("access_key and secret_key cannot be empty")
        self._credentials = Credentials(access_key, secret_key)
        logger.info("Credentials updated for access key %s", access_key)

    def _send(self, request: VWSRequest, callback: Optional[ResponseCallback]) -> PendingCall:
        return self._dispatcher.dispatch(request, callback)

    def _options(self) -> dict:
        return {'content_type': self.config['content_type']}

    def create_target(self, name: str, width: float, image: bytes, active_flag: bool, metadata: str,
                      callback: Optional[ResponseCallback] = None) -> PendingCall:
        """
        Add a new target to the database.

        Args:
            name: Target name
            width: Target width in scene units (meters)
            image: JPEG-encoded image bytes
            active_flag: Whether the target is active for recognition
            metadata: Plain-text application metadata
            callback: Called once with the OperationResponse

        Returns:
            PendingCall resolving to an OperationResponse whose target_id
            is set on success ("TargetCreated")

        Raises:
            InvalidImageError: If image is empty
        """
        payload = builder.make_payload(name, width, image, active_flag, metadata)
        return self._send(builder.create_target(self._credentials, payload, **self._options()), callback)

    def retrieve_target(self, target_id: str, callback: Optional[ResponseCallback] = None) -> PendingCall:
        """Fetch a target record; resolves to an OperationResponse with target_record."""
        return self._send(builder.retrieve_target(self._credentials, target_id, **self._options()), callback)

    def retrieve_target_list(self, callback: Optional[ResponseCallback] = None) -> PendingCall:
        """List target ids; resolves to an OperationResponse with results."""
        return self._send(builder.retrieve_target_list(self._credentials, **self._options()), callback)

    def retrieve_target_duplicates(self, target_id: str,
                                   callback: Optional[ResponseCallback] = None) -> PendingCall:
        """List targets similar to one; resolves to an OperationResponse with similar_targets."""
        return self._send(
            builder.retrieve_target_duplicates(self._credentials, target_id, **self._options()), callback)

    def update_target(self, target_id: str, name: str, width: float, image: bytes, active_flag: bool,
                      metadata: str, callback: Optional[ResponseCallback] = None) -> PendingCall:
        """Replace every attribute of a target."""
        payload = builder.make_payload(name, width, image, active_flag, metadata)
        return self._send(
            builder.update_target(self._credentials, target_id, payload, **self._options()), callback)

    def update_target_name(self, target_id: str, name: str,
                           callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(
            builder.update_target_name(self._credentials, target_id, name, **self._options()), callback)

    def update_target_width(self, target_id: str, width: float,
                            callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(
            builder.update_target_width(self._credentials, target_id, width, **self._options()), callback)

    def update_target_image(self, target_id: str, image: bytes,
                            callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(
            builder.update_target_image(self._credentials, target_id, image, **self._options()), callback)

    def update_target_flag(self, target_id: str, active_flag: bool,
                           callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(
            builder.update_target_flag(self._credentials, target_id, active_flag, **self._options()), callback)

    def update_target_metadata(self, target_id: str, metadata: str,
                               callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(
            builder.update_target_metadata(self._credentials, target_id, metadata, **self._options()), callback)

    def delete_target(self, target_id: str, callback: Optional[ResponseCallback] = None) -> PendingCall:
        return self._send(builder.delete_target(self._credentials, target_id, **self._options()), callback)

    def retrieve_target_summary(self, target_id: str,
                                callback: Optional[ResponseCallback] = None) -> PendingCall:
        """Fetch recognition statistics; resolves to a TargetSummary."""
        return self._send(
            builder.retrieve_target_summary(self._credentials, target_id, **self._options()), callback)

    def retrieve_database_summary(self, callback: Optional[ResponseCallback] = None) -> PendingCall:
        """Fetch image counts for the database; resolves to a DatabaseSummary."""
        return self._send(builder.retrieve_database_summary(self._credentials, **self._options()), callback)

    def close(self):
        """Wait for in-flight calls, then release the pool and HTTP session."""
        self._executor.shutdown(wait=True)
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
