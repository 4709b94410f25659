"""Default images for articles without a feed or scraped image."""

_UNSPLASH = "https://images.unsplash.com/{photo}?w=1200&h=630&fit=crop"

GENERIC_IMAGE = _UNSPLASH.format(photo="photo-1504711434969-e33886168f5c")

GENRE_IMAGES = {
    "Politics": _UNSPLASH.format(photo="photo-1541872703-74c5e44368f9"),
    "Crime": _UNSPLASH.format(photo="photo-1589829545856-d10d557cf95f"),
    "Sports": _UNSPLASH.format(photo="photo-1531415074968-036ba1b575da"),
    "Entertainment": _UNSPLASH.format(photo="photo-1489599849927-2ee91cede3ba"),
    "Business": _UNSPLASH.format(photo="photo-1611974789855-9c2a0a7236a3"),
    "Technology": _UNSPLASH.format(photo="photo-1518770660439-4636190af475"),
    "Health": _UNSPLASH.format(photo="photo-1505751172876-fa1923c5c528"),
    "Environment": _UNSPLASH.format(photo="photo-1441974231531-c6227db76b6e"),
    "Education": _UNSPLASH.format(photo="photo-1523050854058-8df90110c9f1"),
    "Lifestyle": _UNSPLASH.format(photo="photo-1490645935967-10de6ba17061"),
    "Weather": _UNSPLASH.format(photo="photo-1534088568595-a066f410bcda"),
}

REGION_IMAGES = {
    "uttarakhand": _UNSPLASH.format(photo="photo-1626621341517-bbf3d9990a23"),
    "india": _UNSPLASH.format(photo="photo-1524492412937-b28074a5d7da"),
    "international": _UNSPLASH.format(photo="photo-1451187580459-43490279c0fa"),
}


def default_image(genre: str, region: str) -> str:
    """Genre image, else region image, else the generic news image."""
    return GENRE_IMAGES.get(genre) or REGION_IMAGES.get(region) or GENERIC_IMAGE
