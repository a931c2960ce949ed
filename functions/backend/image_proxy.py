"""
Fetches retailer product images on behalf of the browser.

Amazon's CDNs reject hotlinked requests without browser headers, so the web
client loads product images through these helpers instead.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass, field
from urllib.parse import quote, urlparse

import requests

from shared.constants import PLACEHOLDER_IMAGE_URL

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15  # seconds

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

AMAZON_IMAGE_HOSTS = ("media-amazon.com", "images-amazon.com")
ALLOWED_IMAGE_DOMAINS = (
    "media-amazon.com",
    "images-amazon.com",
    "ssl-images-amazon.com",
    "placehold.co",
    "placeholder.com",
    "images.weserv.nl",
)
WESERV_PROXY_URL = "https://images.weserv.nl/?url={url}"

DEFAULT_CONTENT_TYPE = "image/jpeg"
SHORT_CACHE_CONTROL = "public, max-age=86400"
IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


class ImageProxyError(Exception):
    """A proxy failure carrying the HTTP status to return to the client."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass
class ProxiedImage:
    content: bytes
    content_type: str
    headers: dict = field(default_factory=dict)


def is_allowed_host(hostname: str | None) -> bool:
    """True when `hostname` is an allow-listed domain or one of its subdomains."""
    if not hostname:
        return False
    hostname = hostname.lower()
    return any(
        hostname == domain or hostname.endswith("." + domain)
        for domain in ALLOWED_IMAGE_DOMAINS
    )


def _is_dns_failure(error: BaseException) -> bool:
    # requests wraps the resolver error a few levels deep.
    pending = [error]
    seen = set()
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        pending.extend([current.__cause__, current.__context__])
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
        pending.extend(a for a in current.args if isinstance(a, BaseException))
    return False


def _fetch(url: str, headers: dict, timeout: float) -> requests.Response:
    response = requests.get(url, headers=headers, timeout=timeout)
    logger.debug("Upstream %s responded %s", url, response.status_code)
    if not response.ok:
        logger.error(
            "Upstream fetch failed for %s with status %s", url, response.status_code
        )
        raise ImageProxyError(
            response.status_code,
            f"Failed to fetch image. Status: {response.status_code}",
        )
    return response


def _content_type(response: requests.Response) -> str:
    return response.headers.get("content-type") or DEFAULT_CONTENT_TYPE


def proxy_amazon_image(url: str | None, timeout: float = REQUEST_TIMEOUT) -> ProxiedImage:
    """
    Fetches an Amazon CDN image with browser headers.

    Raises:
        ImageProxyError: 400 for a missing or non-Amazon URL, the upstream
            status for a failed fetch, 500 for a transport error.
    """
    if not url:
        raise ImageProxyError(400, "Missing image URL")
    if not any(host in url for host in AMAZON_IMAGE_HOSTS):
        raise ImageProxyError(400, "Invalid image source")

    try:
        response = _fetch(url, BROWSER_HEADERS, timeout)
    except requests.RequestException as e:
        logger.error("Error proxying image %s: %s", url, e)
        raise ImageProxyError(500, "Internal server error")

    return ProxiedImage(
        content=response.content,
        content_type=_content_type(response),
        headers={
            "Cache-Control": SHORT_CACHE_CONTROL,
            "Access-Control-Allow-Origin": "*",
        },
    )


def proxy_allowed_image(url: str | None, timeout: float = REQUEST_TIMEOUT) -> ProxiedImage:
    """
    Fetches an image from an allow-listed host.

    Amazon hosts are fetched through the images.weserv.nl proxy. A direct
    fetch whose host cannot be resolved returns the placeholder image.

    Raises:
        ImageProxyError: 400 for a missing, malformed or disallowed URL, the
            upstream status for a failed fetch, 500 for a transport error.
    """
    if not url:
        raise ImageProxyError(400, "Error: Missing image URL parameter.")
    try:
        parsed = urlparse(url)
    except ValueError:
        raise ImageProxyError(400, "Error: Invalid URL format.")
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ImageProxyError(400, "Error: Invalid URL format.")
    if not is_allowed_host(parsed.hostname):
        raise ImageProxyError(400, f"Error: Domain {parsed.hostname} not allowed.")

    if "amazon.com" in parsed.hostname:
        proxy_url = WESERV_PROXY_URL.format(url=quote(url, safe="!~*'()"))
        logger.info("Routing Amazon image through %s", proxy_url)
        try:
            response = _fetch(proxy_url, BROWSER_HEADERS, timeout)
        except requests.RequestException as e:
            logger.error("Error proxying %s via external service: %s", url, e)
            raise ImageProxyError(
                500, f"Error proxying image via external service: {e}"
            )
    else:
        headers = {**BROWSER_HEADERS, "Referer": "https://www.amazon.com/"}
        try:
            response = _fetch(url, headers, timeout)
        except requests.RequestException as e:
            if not _is_dns_failure(e):
                logger.error("Error proxying image %s: %s", url, e)
                raise ImageProxyError(500, f"Error proxying image: {e}")
            logger.error("DNS resolution failed for %s. Using fallback image.", url)
            return _placeholder_image(timeout)

    return ProxiedImage(
        content=response.content,
        content_type=_content_type(response),
        headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL},
    )


def _placeholder_image(timeout: float) -> ProxiedImage:
    try:
        response = requests.get(PLACEHOLDER_IMAGE_URL, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ImageProxyError(500, f"Error fetching fallback image: {e}")
    return ProxiedImage(
        content=response.content,
        content_type=_content_type(response),
        headers={"Cache-Control": IMMUTABLE_CACHE_CONTROL},
    )
