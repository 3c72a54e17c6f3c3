"""
Site-level operations of the ParWorks AR platform.

ARSites finds and creates sites; ARSite wraps one existing site and
exposes its base images, overlays and augmentation. Every operation has
a blocking form and an ``*_async`` form returning a Future.
"""

from concurrent.futures import Future
from typing import BinaryIO, List, Optional, Union

from .constants import (
    ADD_BASE_IMAGE_PATH,
    ADD_OVERLAY_PATH,
    ADD_SITE_PATH,
    AUGMENT_IMAGE_PATH,
    AUGMENT_IMAGE_RESULT_PATH,
    BASE_IMAGE_PROCESSING_STATE_PATH,
    GET_SITE_INFO_PATH,
    GET_SITE_OVERLAYS_PATH,
    INITIATE_BASE_IMAGE_PROCESSING_PATH,
    LIST_BASE_IMAGES_PATH,
    NEARBY_SITE_PATH,
    REMOVE_OVERLAY_PATH,
    REMOVE_SITE_PATH,
    SAVE_OVERLAY_PATH
)
from .invoker import ARCall, ErrorCallback, Invoker, SuccessCallback
from .models import AugmentedImage, AugmentResult, BaseImage, Overlay, SiteInfo
from .response import require_success

ImageData = Union[bytes, BinaryIO]


def require_id(value: Optional[str], name: str) -> str:
    """Reject empty identifiers before anything is sent."""
    if not value:
        raise ValueError(f"{name} cannot be empty")
    return value


def _number(value) -> str:
    return '' if value is None else str(value)


def augment_result_call(img_id: str) -> ARCall:
    """Fetch the overlay placements computed for an augmented image."""
    require_id(img_id, "img_id")

    def extract(raw):
        body = require_success(
            raw,
            "Successfully communicated with the server, but couldn't get the "
            "augmentation result. The image may still be processing."
        )
        return AugmentResult.from_dict(body, img_id)

    return ARCall('GET', AUGMENT_IMAGE_RESULT_PATH, extract, {'imgId': img_id})


class _Facade:
    def __init__(self, invoker: Invoker):
        self._invoker = invoker

    def _call(self, call: ARCall, timeout: Optional[float]):
        return self._invoker.call(call, timeout)

    def _call_async(
        self,
        call: ARCall,
        on_success: Optional[SuccessCallback],
        on_error: Optional[ErrorCallback],
        timeout: Optional[float]
    ) -> Future:
        return self._invoker.call_async(call, on_success, on_error, timeout)


class ARSites(_Facade):
    """Finds, creates and looks up ARSites."""

    def _create_call(self, site_id, description, channel, name, lon, lat, feature) -> ARCall:
        require_id(site_id, "site_id")
        params = {'id': site_id, 'description': description, 'channel': channel}
        full_form = {'name': name, 'lon': lon, 'lat': lat, 'feature': feature}
        if any(value is not None for value in full_form.values()):
            missing = [key for key, value in full_form.items() if value is None]
            if missing:
                raise ValueError(
                    f"Full site creation also requires: {', '.join(missing)}"
                )
            params.update({
                'name': name,
                'lon': _number(lon),
                'lat': _number(lat),
                'feature': feature,
            })

        def extract(raw):
            require_success(
                raw,
                "Successfully communicated with the server, but failed to create "
                "a new site. The site id could already be in use."
            )
            return ARSite(site_id, self._invoker)

        return ARCall('POST', ADD_SITE_PATH, extract, params)

    def create(
        self,
        site_id: str,
        description: str,
        channel: str,
        name: Optional[str] = None,
        lon: Optional[float] = None,
        lat: Optional[float] = None,
        feature: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> 'ARSite':
        """
        Create a site and return it as stored by the platform.

        Passing any of name, lon, lat or feature selects the full form of the
        call, which requires all four of them (ValueError otherwise).

        Raises:
            DomainError: If the platform refused the site (id probably in use)
        """
        call = self._create_call(site_id, description, channel, name, lon, lat, feature)
        self._call(call, timeout)
        return self.get_existing(site_id, timeout=timeout)

    def create_async(
        self,
        site_id: str,
        description: str,
        channel: str,
        name: Optional[str] = None,
        lon: Optional[float] = None,
        lat: Optional[float] = None,
        feature: Optional[str] = None,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        timeout: Optional[float] = None
    ) -> Future:
        """Create a site; the response payload is an ARSite for site_id."""
        call = self._create_call(site_id, description, channel, name, lon, lat, feature)
        return self._call_async(call, on_success, on_error, timeout)

    def _get_existing_call(self, site_id) -> ARCall:
        require_id(site_id, "site_id")

        def extract(raw):
            body = require_success(
                raw,
                "Successfully communicated with the server, but failed to get "
                "siteinfo. A site with the specified id probably does not exist."
            )
            return ARSite(body['site']['id'], self._invoker)

        return ARCall('GET', GET_SITE_INFO_PATH, extract, {'site': site_id})

    def get_existing(self, site_id: str, timeout: Optional[float] = None) -> 'ARSite':
        """Look up a previously created site."""
        return self._call(self._get_existing_call(site_id), timeout)

    def get_existing_async(self, site_id, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._get_existing_call(site_id), on_success, on_error, timeout)

    def _near_call(self, lat, lon, max_sites, radius) -> ARCall:
        params = {
            'lat': _number(lat),
            'lon': _number(lon),
            'max': _number(max_sites),
            'radius': _number(radius),
        }

        def extract(raw):
            body = require_success(
                raw,
                "Successfully communicated with the server, but the server was "
                "unsuccessful in finding nearby sites."
            )
            return [ARSite(info['id'], self._invoker) for info in body.get('sites') or []]

        return ARCall('GET', NEARBY_SITE_PATH, extract, params)

    def near(
        self,
        lat: float,
        lon: float,
        max_sites: Optional[int] = None,
        radius: Optional[float] = None,
        timeout: Optional[float] = None
    ) -> List['ARSite']:
        """
        Find the sites closest to a coordinate.

        Without max_sites and radius the server defaults apply (one site).
        """
        return self._call(self._near_call(lat, lon, max_sites, radius), timeout)

    def near_async(
        self,
        lat: float,
        lon: float,
        max_sites: Optional[int] = None,
        radius: Optional[float] = None,
        on_success: Optional[SuccessCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        timeout: Optional[float] = None
    ) -> Future:
        return self._call_async(
            self._near_call(lat, lon, max_sites, radius), on_success, on_error, timeout
        )


class ARSite(_Facade):
    """An existing site bound to the client handle that found it."""

    def __init__(self, site_id: str, invoker: Invoker):
        super().__init__(invoker)
        self.site_id = require_id(site_id, "site_id")

    def __repr__(self):
        return f"ARSite(site_id={self.site_id!r})"

    def __eq__(self, other):
        if not isinstance(other, ARSite):
            return NotImplemented
        return self.site_id == other.site_id

    def __hash__(self):
        return hash(self.site_id)

    def _site_call(self, method, path, message, decode, params=None, files=None) -> ARCall:
        def extract(raw):
            return decode(require_success(raw, message))

        query = {'site': self.site_id}
        query.update(params or {})
        return ARCall(method, path, extract, query, files)

    # Site info

    def _info_call(self) -> ARCall:
        return self._site_call(
            'GET', GET_SITE_INFO_PATH,
            "Successfully communicated with the server, but failed to get siteinfo.",
            lambda body: SiteInfo.from_dict(body['site'])
        )

    def info(self, timeout=None) -> SiteInfo:
        return self._call(self._info_call(), timeout)

    def info_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._info_call(), on_success, on_error, timeout)

    def _remove_call(self) -> ARCall:
        return self._site_call(
            'GET', REMOVE_SITE_PATH,
            "Successfully communicated with the server, but failed to remove the site.",
            lambda body: True
        )

    def remove(self, timeout=None) -> bool:
        """Delete the site from the platform."""
        return self._call(self._remove_call(), timeout)

    def remove_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._remove_call(), on_success, on_error, timeout)

    # Base images

    def _base_images_call(self) -> ARCall:
        return self._site_call(
            'GET', LIST_BASE_IMAGES_PATH,
            "Successfully communicated with the server, but failed to list base images.",
            lambda body: [BaseImage.from_dict(image) for image in body.get('images') or []]
        )

    def base_images(self, timeout=None) -> List[BaseImage]:
        return self._call(self._base_images_call(), timeout)

    def base_images_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._base_images_call(), on_success, on_error, timeout)

    def _add_base_image_call(self, filename, image) -> ARCall:
        require_id(filename, "filename")
        return self._site_call(
            'POST', ADD_BASE_IMAGE_PATH,
            "Successfully communicated with the server, but failed to add the base image.",
            lambda body: BaseImage(id=str(body['id']), filename=filename),
            params={'filename': filename},
            files={'image': (filename, image)}
        )

    def add_base_image(self, filename: str, image: ImageData, timeout=None) -> BaseImage:
        """Upload a reference image to the site."""
        return self._call(self._add_base_image_call(filename, image), timeout)

    def add_base_image_async(self, filename, image, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(
            self._add_base_image_call(filename, image), on_success, on_error, timeout
        )

    def _process_call(self) -> ARCall:
        return self._site_call(
            'GET', INITIATE_BASE_IMAGE_PROCESSING_PATH,
            "Successfully communicated with the server, but failed to start "
            "base image processing.",
            lambda body: True
        )

    def process_base_images(self, timeout=None) -> bool:
        """Start matching preparation of the uploaded base images."""
        return self._call(self._process_call(), timeout)

    def process_base_images_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._process_call(), on_success, on_error, timeout)

    def _processing_state_call(self) -> ARCall:
        return self._site_call(
            'GET', BASE_IMAGE_PROCESSING_STATE_PATH,
            "Successfully communicated with the server, but failed to get the "
            "base image processing state.",
            lambda body: body.get('state')
        )

    def base_image_processing_state(self, timeout=None) -> Optional[str]:
        return self._call(self._processing_state_call(), timeout)

    def base_image_processing_state_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._processing_state_call(), on_success, on_error, timeout)

    # Overlays

    def _overlays_call(self) -> ARCall:
        return self._site_call(
            'GET', GET_SITE_OVERLAYS_PATH,
            "Successfully communicated with the server, but failed to get the site overlays.",
            lambda body: [
                Overlay.from_dict(overlay, self.site_id)
                for overlay in body.get('overlays') or []
            ]
        )

    def overlays(self, timeout=None) -> List[Overlay]:
        return self._call(self._overlays_call(), timeout)

    def overlays_async(self, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._overlays_call(), on_success, on_error, timeout)

    def _add_overlay_call(self, image_id, name, content) -> ARCall:
        require_id(image_id, "image_id")

        def decode(body):
            return Overlay(str(body['id']), self.site_id, image_id, name, content)

        return self._site_call(
            'POST', ADD_OVERLAY_PATH,
            "Successfully communicated with the server, but failed to add the overlay.",
            decode,
            params={'imageId': image_id, 'name': name, 'content': content}
        )

    def add_overlay(self, image_id: str, name: str, content: str = '', timeout=None) -> Overlay:
        return self._call(self._add_overlay_call(image_id, name, content), timeout)

    def add_overlay_async(self, image_id, name, content='', on_success=None, on_error=None,
                          timeout=None) -> Future:
        return self._call_async(
            self._add_overlay_call(image_id, name, content), on_success, on_error, timeout
        )

    def _save_overlay_call(self, overlay: Overlay) -> ARCall:
        require_id(overlay.id, "overlay.id")
        return self._site_call(
            'POST', SAVE_OVERLAY_PATH,
            "Successfully communicated with the server, but failed to save the overlay.",
            lambda body: overlay,
            params={
                'id': overlay.id,
                'imageId': overlay.image_id,
                'name': overlay.name,
                'content': overlay.content,
            }
        )

    def save_overlay(self, overlay: Overlay, timeout=None) -> Overlay:
        return self._call(self._save_overlay_call(overlay), timeout)

    def save_overlay_async(self, overlay, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._save_overlay_call(overlay), on_success, on_error, timeout)

    def _remove_overlay_call(self, overlay_id) -> ARCall:
        require_id(overlay_id, "overlay_id")
        return self._site_call(
            'POST', REMOVE_OVERLAY_PATH,
            "Successfully communicated with the server, but failed to remove the overlay.",
            lambda body: True,
            params={'id': overlay_id}
        )

    def remove_overlay(self, overlay_id: str, timeout=None) -> bool:
        return self._call(self._remove_overlay_call(overlay_id), timeout)

    def remove_overlay_async(self, overlay_id, on_success=None, on_error=None, timeout=None) -> Future:
        return self._call_async(self._remove_overlay_call(overlay_id), on_success, on_error, timeout)

    # Augmentation

    def _augment_call(self, image, filename) -> ARCall:
        return self._site_call(
            'POST', AUGMENT_IMAGE_PATH,
            "Successfully communicated with the server, but failed to submit "
            "the image for augmentation.",
            lambda body: AugmentedImage(img_id=str(body['imgId']), site=self.site_id),
            files={'image': (filename, image)}
        )

    def augment_image(self, image: ImageData, filename: str = 'image.jpg', timeout=None) -> AugmentedImage:
        """Submit an image to be matched against this site's base images."""
        return self._call(self._augment_call(image, filename), timeout)

    def augment_image_async(self, image, filename='image.jpg', on_success=None, on_error=None,
                            timeout=None) -> Future:
        return self._call_async(self._augment_call(image, filename), on_success, on_error, timeout)

    def augmented_image_result(self, img_id: str, timeout=None) -> AugmentResult:
        return self._call(augment_result_call(img_id), timeout)

    def augmented_image_result_async(self, img_id, on_success=None, on_error=None,
                                     timeout=None) -> Future:
        return self._call_async(augment_result_call(img_id), on_success, on_error, timeout)
