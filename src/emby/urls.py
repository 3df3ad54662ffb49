"""Image, stream and subtitle URL construction.

These URLs are handed to consumers that cannot set request headers (media
players, <img> tags), so the credential travels as the ``api_key`` query
parameter. Nothing here touches the network.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from .models import Subtitle
from .session import Session

IMAGE_TYPES = ("Primary", "Backdrop", "Logo")


def _with_query(url: str, params: Dict[str, str]) -> str:
    if not params:
        return url
    return f"{url}?{urlencode(params)}"


def image_url(
    session: Session,
    item_id: str,
    image_type: str = "Primary",
    max_width: Optional[int] = None,
) -> str:
    """Build the URL of an item image.

    Args:
        session: Current session (endpoint and credential)
        item_id: Emby item id
        image_type: One of IMAGE_TYPES
        max_width: Optional maximum width in pixels

    Returns:
        Image URL, e.g. ``{endpoint}/Items/abc/Images/Primary?maxWidth=300&api_key=...``
    """
    params: Dict[str, str] = {}
    if max_width:
        params["maxWidth"] = str(max_width)
    token = session.credential().token
    if token:
        params["api_key"] = token
    return _with_query(f"{session.endpoint}/Items/{item_id}/Images/{image_type}", params)


def stream_url(session: Session, item_id: str, direct: bool = True) -> str:
    """Build a playback URL: direct static stream, or an HLS master playlist."""
    token = session.credential().token
    if direct:
        params = {"Static": "true"}
        path = f"{session.endpoint}/Videos/{item_id}/stream"
    else:
        params = {}
        path = f"{session.endpoint}/Videos/{item_id}/master.m3u8"
    if token:
        params["api_key"] = token
    return _with_query(path, params)


def subtitle_urls(session: Session, item: Dict[str, Any]) -> List[Subtitle]:
    """List the subtitle tracks of an item's first media source.

    External subtitles use the server's DeliveryUrl as-is (it is already
    authorized). Embedded subtitles go through the VTT extraction endpoint
    with the credential attached.

    Args:
        session: Current session
        item: Item payload including MediaSources

    Returns:
        One Subtitle per subtitle stream, in stream order
    """
    media_sources = item.get("MediaSources") or []
    if not media_sources:
        return []

    media_source = media_sources[0]
    streams = media_source.get("MediaStreams") or []
    token = session.credential().token

    subtitles = []
    for stream in streams:
        if stream.get("Type") != "Subtitle":
            continue

        language = stream.get("Language") or "unknown"
        label = stream.get("DisplayTitle") or f"{language} ({stream.get('Codec') or 'unknown'})"

        if stream.get("IsExternal") and stream.get("DeliveryUrl"):
            url = f"{session.endpoint}{stream.get('DeliveryUrl')}"
        else:
            url = _with_query(
                f"{session.endpoint}/Videos/{item.get('Id')}/{media_source.get('Id')}"
                f"/Subtitles/{stream.get('Index')}/Stream.vtt",
                {"api_key": token} if token else {},
            )

        subtitles.append(Subtitle(url=url, language=language, label=label))

    return subtitles
