"""
Value objects decoded from platform responses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _optional_float(value) -> Optional[float]:
    if value in (None, ''):
        return None
    return float(value)


@dataclass
class SiteInfo:
    """Site metadata as returned by /ar/site/info and /ar/site/nearby."""
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    channel: Optional[str] = None
    feature: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    state: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SiteInfo':
        return cls(
            id=data['id'],
            name=data.get('name'),
            description=data.get('description'),
            channel=data.get('channel'),
            feature=data.get('feature'),
            lat=_optional_float(data.get('lat')),
            lon=_optional_float(data.get('lon')),
            state=data.get('siteState', data.get('state'))
        )


@dataclass
class BaseImage:
    """Reference image uploaded to a site."""
    id: str
    filename: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseImage':
        return cls(id=str(data['id']), filename=data.get('filename'))


@dataclass
class Overlay:
    """Annotation attached to a base image of a site."""
    id: Optional[str]
    site: str
    image_id: str
    name: str
    content: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], site: str) -> 'Overlay':
        overlay_id = data.get('id')
        return cls(
            id=str(overlay_id) if overlay_id is not None else None,
            site=data.get('site', site),
            image_id=str(data.get('imageId', '')),
            name=data.get('name', ''),
            content=data.get('content', '')
        )


@dataclass
class AugmentedImage:
    """Handle for an image submitted for augmentation."""
    img_id: str
    site: Optional[str] = None


@dataclass
class AugmentResult:
    """Overlay placements computed for an augmented image."""
    img_id: str
    site: Optional[str] = None
    overlays: List[Dict[str, Any]] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], img_id: str) -> 'AugmentResult':
        return cls(
            img_id=data.get('imgId', img_id),
            site=data.get('site'),
            overlays=list(data.get('overlays') or []),
            raw=dict(data)
        )
