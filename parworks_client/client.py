"""
ParWorks AR client handle.

This module binds one credential triple to a shared HTTP session and a
worker pool, and exposes the platform's site and augmentation calls.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .constants import (
    AUGMENT_IMAGE_WITH_PROXIMITY_SEARCH_PATH,
    DEFAULT_CONFIG,
    HEALTH_CHECK_PATH,
    SIGNATURE_ENCODINGS
)
from .exceptions import ConfigurationError
from .invoker import ARCall, Invoker
from .models import AugmentedImage, AugmentResult
from .response import require_success
from .signer import Credentials
from .sites import ARSites, ImageData, augment_result_call
from .transport import HTTPTransport

logger = logging.getLogger(__name__)


class ARClient:
    """
    Client for making authenticated requests to the ParWorks AR platform.

    The auth triple is computed once, when the client is created, and sent
    with every request. Every call has a blocking form and an ``*_async``
    form that runs on the client's worker pool and returns a Future.
    """

    def __init__(self, api_key: str, secret_key: str, **config):
        """
        Initialize ParWorks client.

        Args:
            api_key: Platform API key
            secret_key: Platform secret key (used once to sign, not stored)
            **config: Configuration options (base_url, timeout, max_workers,
                signature_encoding)
        """
        # Merge default config with user overrides
        self.config = {**DEFAULT_CONFIG, **config}
        self._validate_config()

        self.base_url = self.config['base_url'].rstrip('/')
        self.credentials = Credentials.create(
            api_key,
            secret_key,
            encoding=self.config['signature_encoding']
        )

        self.transport = HTTPTransport(timeout=self.config['timeout'])
        self.executor = ThreadPoolExecutor(
            max_workers=self.config['max_workers'],
            thread_name_prefix='parworks'
        )
        self.invoker = Invoker(self.credentials, self.transport, self.base_url, self.executor)
        self.sites = ARSites(self.invoker)

        logger.debug("ParWorks client created for %s", self.base_url)

    def _validate_config(self):
        """Validate client configuration."""
        if not self.config['base_url']:
            raise ConfigurationError("base_url cannot be empty")

        if self.config['timeout'] is not None and self.config['timeout'] <= 0:
            raise ConfigurationError("timeout must be positive")

        if self.config['max_workers'] <= 0:
            raise ConfigurationError("max_workers must be positive")

        if self.config['signature_encoding'] not in SIGNATURE_ENCODINGS:
            raise ConfigurationError(
                f"signature_encoding must be one of {', '.join(SIGNATURE_ENCODINGS)}"
            )

    def _ping_call(self) -> ARCall:
        def extract(raw):
            require_success(raw, "The server is reachable but reported it is unhealthy.")
            return True

        return ARCall('GET', HEALTH_CHECK_PATH, extract)

    def ping(self, timeout: Optional[float] = None) -> bool:
        """Check that the platform is up and accepts the credentials."""
        return self.invoker.call(self._ping_call(), timeout)

    def ping_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self.invoker.call_async(self._ping_call(), on_success, on_error, timeout)

    def _augment_geo_call(self, lat, lon, radius, image, filename) -> ARCall:
        def extract(raw):
            body = require_success(
                raw,
                "Successfully communicated with the server, but failed to submit "
                "the image for augmentation near the given coordinates."
            )
            return AugmentedImage(img_id=str(body['imgId']), site=body.get('site'))

        params = {'lat': str(lat), 'lon': str(lon), 'radius': str(radius)}
        return ARCall(
            'POST',
            AUGMENT_IMAGE_WITH_PROXIMITY_SEARCH_PATH,
            extract,
            params,
            files={'image': (filename, image)}
        )

    def augment_image_geo(
        self,
        lat: float,
        lon: float,
        radius: float,
        image: ImageData,
        filename: str = 'image.jpg',
        timeout: Optional[float] = None
    ) -> AugmentedImage:
        """
        Augment an image against whichever site lies within radius of a point.

        Args:
            lat: Latitude where the image was taken
            lon: Longitude where the image was taken
            radius: Search radius around the point
            image: Image bytes or binary file object
            filename: Name sent with the multipart image part
            timeout: Per-call deadline in seconds

        Returns:
            AugmentedImage whose img_id can be passed to augmented_image_result
        """
        return self.invoker.call(self._augment_geo_call(lat, lon, radius, image, filename), timeout)

    def augment_image_geo_async(self, lat, lon, radius, image, filename='image.jpg',
                                on_success=None, on_error=None, timeout=None) -> Future:
        return self.invoker.call_async(
            self._augment_geo_call(lat, lon, radius, image, filename),
            on_success, on_error, timeout
        )

    def augmented_image_result(self, img_id: str, timeout: Optional[float] = None) -> AugmentResult:
        return self.invoker.call(augment_result_call(img_id), timeout)

    def augmented_image_result_async(self, img_id, on_success=None, on_error=None,
                                     timeout=None) -> Future:
        return self.invoker.call_async(augment_result_call(img_id), on_success, on_error, timeout)

    def close(self):
        """
        Wait for pending async calls, then close the HTTP session.

        Called from an async callback, it stops accepting new calls without
        waiting, since the calling worker cannot join itself.
        """
        self.executor.shutdown(wait=not self.invoker.in_worker())
        self.transport.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
