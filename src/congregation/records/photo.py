"""Member photo extraction from rich-text markup.

The upstream photo field is a rich-text HTML fragment such as

    <p><img src="https://.../rtaImage?eid=...&amp;refid=..." alt="Profile Photo"></img></p>

parse_photo() pulls the first img tag's src and alt. The src is
entity-decoded; the alt is normalized for display-independent use. A
fragment without a usable src yields no photo at all.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

# Alt text the WhatsApp client gives to saved images
WHATSAPP_ALT = re.compile(r"^whats\s*app\s+image\b", re.IGNORECASE)


class MemberPhoto(BaseModel):
    """Photo reference parsed from a member record."""

    url: str = Field(..., description="Image URL with HTML entities decoded")
    alt: Optional[str] = Field(None, description="Normalized alt text")
    tags: List[str] = Field(default_factory=list, description="Source hints, e.g. whatsapp")

    model_config = ConfigDict(frozen=True)


def normalize_alt(alt: Optional[str]) -> Optional[str]:
    """Normalize alt text.

    Underscores and dashes become spaces, whitespace runs collapse, the
    result is trimmed and capitalized (first letter upper, rest lower).
    Empty results are None.
    """
    if alt is None:
        return None
    text = re.sub(r"[_-]", " ", alt)
    text = re.sub(r"\s+", " ", text).strip()
    if not text:
        return None
    return text.capitalize()


def photo_tags(alt: Optional[str]) -> List[str]:
    """Source hints for a normalized alt text."""
    if alt and WHATSAPP_ALT.match(alt):
        return ["whatsapp"]
    return []


def parse_photo(markup: Optional[str]) -> Optional[MemberPhoto]:
    """Parse the photo markup of a member record.

    Args:
        markup: Raw HTML fragment (may carry backslash-escaped quotes)

    Returns:
        MemberPhoto, or None if there is no img tag with a non-empty src
    """
    if not markup or not markup.strip():
        return None

    # Records exported through some tools keep JSON-escaped quotes.
    html = markup.replace('\\"', '"')
    soup = BeautifulSoup(html, "html.parser")
    img = soup.find("img")
    if img is None:
        return None

    src = img.get("src")
    if not src or not str(src).strip():
        return None

    raw_alt = img.get("alt")
    alt = normalize_alt(str(raw_alt)) if raw_alt is not None else None
    return MemberPhoto(url=str(src).strip(), alt=alt, tags=photo_tags(alt))
