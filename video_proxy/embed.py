import re
from typing import Optional
from urllib.parse import quote

from .models import EmbedTarget

PROXY_PATH = "/api/video-proxy"
# Characters encodeURIComponent leaves alone, so links match the browser player's
_URI_COMPONENT_SAFE = "!*'()"

_DRIVE_ID = re.compile(r"[-\w]{25,}")
_DIRECT_VIDEO = re.compile(r"\.(mp4|webm|m3u8|mkv)(\?|$)", re.IGNORECASE)


def build_proxy_url(target_url: str, base_url: Optional[str] = None) -> str:
    """Proxy URL for a target; relative when no public base is known."""
    base = (base_url or "").rstrip("/")
    return f"{base}{PROXY_PATH}?url={quote(target_url, safe=_URI_COMPONENT_SAFE)}"


def _after(url: str, marker: str) -> str:
    return url.split(marker, 1)[1] if marker in url else ""


def resolve_embed(url: str, base_url: Optional[str] = None) -> EmbedTarget:
    """Decide how a player should show a watch URL: an iframe or a <video> source."""
    if "youtube.com" in url or "youtu.be" in url:
        if "youtu.be" in url:
            video_id = _after(url, "youtu.be/").split("?")[0]
        else:
            video_id = _after(url, "v=").split("&")[0]
        return EmbedTarget(type="iframe", src=f"https://www.youtube.com/embed/{video_id}?autoplay=1&rel=0")

    if "vimeo.com" in url:
        video_id = _after(url, "vimeo.com/").split("?")[0]
        return EmbedTarget(type="iframe", src=f"https://player.vimeo.com/video/{video_id}?autoplay=1")

    if "dailymotion.com" in url or "dai.ly" in url:
        if "dai.ly" in url:
            video_id = _after(url, "dai.ly/")
        else:
            video_id = _after(url, "/video/").split("_")[0]
        return EmbedTarget(type="iframe", src=f"https://www.dailymotion.com/embed/video/{video_id}?autoplay=1")

    if "drive.google.com" in url:
        m = _DRIVE_ID.search(url)
        file_id = m.group(0) if m else ""
        return EmbedTarget(type="iframe", src=f"https://drive.google.com/file/d/{file_id}/preview")

    # StreamWish, Filemoon and friends already hand out embed pages
    if "/e/" in url or "/embed/" in url or "iframe" in url:
        return EmbedTarget(type="iframe", src=url)

    if _DIRECT_VIDEO.search(url):
        return EmbedTarget(type="video", src=url)

    # Download pages rarely send usable video headers; route them through the proxy
    if "download.aspx" in url or "/download/" in url or "?file=" in url:
        return EmbedTarget(type="video", src=build_proxy_url(url, base_url))

    return EmbedTarget(type="iframe", src=url)
