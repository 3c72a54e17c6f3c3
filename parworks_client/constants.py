"""
Constants for the ParWorks AR client library.
Header names and endpoint paths match the ParWorks AR platform.
"""

# HTTP Headers carried by every request
HEADER_API_KEY = "apikey"
HEADER_SALT = "salt"
HEADER_SIGNATURE = "signature"

PARWORKS_API_BASE_URL = "http://dev.parworksapi.com"

# Endpoint paths
HEALTH_CHECK_PATH = "/ar/ping"
ADD_SITE_PATH = "/ar/site/add"
GET_SITE_INFO_PATH = "/ar/site/info"
NEARBY_SITE_PATH = "/ar/site/nearby"
REMOVE_SITE_PATH = "/ar/site/remove"
LIST_BASE_IMAGES_PATH = "/ar/site/image"
ADD_BASE_IMAGE_PATH = "/ar/site/image/add"
INITIATE_BASE_IMAGE_PROCESSING_PATH = "/ar/site/process"
BASE_IMAGE_PROCESSING_STATE_PATH = "/ar/site/process/state"
GET_SITE_OVERLAYS_PATH = "ar/site/overlay"  # registered without a leading slash
ADD_OVERLAY_PATH = "/ar/site/overlay/add"
SAVE_OVERLAY_PATH = "/ar/site/overlay/save"
REMOVE_OVERLAY_PATH = "/ar/site/overlay/remove"
AUGMENT_IMAGE_PATH = "/ar/image/augment"
AUGMENT_IMAGE_WITH_PROXIMITY_SEARCH_PATH = "/ar/image/augment/geo"
AUGMENT_IMAGE_RESULT_PATH = "/ar/image/augment/result"

# Signature representations accepted by the platform
SIGNATURE_ENCODINGS = ("base64", "hex")

# Default configuration values
DEFAULT_CONFIG = {
    'base_url': PARWORKS_API_BASE_URL,
    'timeout': 30,                  # per-call deadline in seconds
    'max_workers': 4,               # threads serving async calls
    'signature_encoding': 'base64',
}

# Status codes treated as success
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 226
