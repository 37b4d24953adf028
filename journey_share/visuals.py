from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from journey_share.errors import ValidationError


class Icon(str, Enum):
    PLANE = "Plane"
    HOTEL = "Hotel"
    RESTAURANT = "Restaurant"
    GIFT = "Gift"
    HEART = "Heart"

    @classmethod
    def parse(cls, name: str) -> "Icon":
        """Case-insensitive lookup returning the canonical icon."""
        wanted = name.strip().lower()
        for icon in cls:
            if icon.value.lower() == wanted:
                return icon
        allowed = ", ".join(icon.value for icon in cls)
        raise ValidationError(f"Invalid icon name. Allowed icons: {allowed}")


@dataclass(frozen=True)
class ImageVisual:
    url: str


@dataclass(frozen=True)
class IconVisual:
    icon: Icon


Visual = Union[ImageVisual, IconVisual]


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def resolve_visual(image_url: Optional[str], icon_name: Optional[str]) -> Visual:
    """Exactly one of image_url / icon_name must be given."""
    has_image = _present(image_url)
    has_icon = _present(icon_name)

    if not has_image and not has_icon:
        raise ValidationError("Either image_url or icon_name is required")
    if has_image and has_icon:
        raise ValidationError("Cannot provide both image_url and icon_name")

    if has_image:
        return ImageVisual(url=image_url.strip())
    return IconVisual(icon=Icon.parse(icon_name))


def format_external_url(url: Optional[str]) -> Optional[str]:
    if url is None or url.strip() == "":
        return None

    url = url.strip()
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"
