"""Content types and safe accessors for normalized page content.

Type-specific item fields live under ``contentTypeData`` rather than at the
item root. The accessors below return ``None`` when a section is absent so
renderers can skip it without special-casing.
"""

from typing import Any, Dict, Optional

PHYSICAL_PRODUCT = 'physical_product'
SERVICE_OFFER = 'service_offer'
LIST_ITEM = 'list_item'
PLACE = 'place'
PERSON = 'person'

CONTENT_TYPES = (PHYSICAL_PRODUCT, SERVICE_OFFER, LIST_ITEM, PLACE, PERSON)
COMMERCE_TYPES = frozenset({PHYSICAL_PRODUCT, SERVICE_OFFER})

# Item fields whose mapping keys are display labels, not schema keys.
FREEFORM_FIELDS = ('attributes',)

PUBLISHED = 'published'


def is_commerce_type(content_type: Optional[str]) -> bool:
    return isinstance(content_type, str) and content_type in COMMERCE_TYPES


def is_place_type(content_type: Optional[str]) -> bool:
    return content_type == PLACE


def is_person_type(content_type: Optional[str]) -> bool:
    return content_type == PERSON


def page_content_type(page_content: Dict[str, Any]) -> Optional[str]:
    """Return the ``pageContentType`` discriminator of a page, if it is a string."""
    content_type = (page_content or {}).get('pageContentType')
    return content_type if isinstance(content_type, str) else None


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def get_commerce(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _dig(item, 'contentTypeData', 'commerce')


def get_place(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _dig(item, 'contentTypeData', 'place')


def get_pricing(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _dig(item, 'contentTypeData', 'commerce', 'source', 'pricing')


def get_location(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return _dig(item, 'contentTypeData', 'place', 'location')
