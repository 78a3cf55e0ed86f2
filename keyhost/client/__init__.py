"""
Client-side helpers: the HTTP client, the property form and the image encoder.
"""

from keyhost.client.api import KeyhostAPIError, KeyhostClient
from keyhost.client.forms import FormValidationError, PropertyForm
from keyhost.client.images import ImageValidationError, encode_image_file

__all__ = [
    "KeyhostClient",
    "KeyhostAPIError",
    "PropertyForm",
    "FormValidationError",
    "ImageValidationError",
    "encode_image_file",
]
