import logging
from typing import Dict, Optional

import httpx

from ..models import DEV_MASTER
from ..settings import Settings

logger = logging.getLogger(__name__)

FALLBACK_VERSIONS = {"": "Latest stable", DEV_MASTER: "Next version (dev-master)"}


def build_version_choices(payload: dict) -> Dict[str, str]:
    """Latest major first, then dev-master, then older majors down to the first EOL one."""
    versions: Dict[str, str] = {}
    for entry in payload.get("data", []):
        latest = not versions
        eol = entry.get("status") == "end-of-life"
        suffix = "(Latest)" if latest else "(End of life)" if eol else ""
        versions[str(entry["major"])] = f"Laravel {entry['major']} {suffix}".strip()
        if latest:
            versions[DEV_MASTER] = "Next version (dev-master)"
        if eol:
            break
    return versions


def fetch_versions(settings: Settings, client: Optional[httpx.Client] = None) -> Dict[str, str]:
    owns_client = client is None
    client = client or httpx.Client(timeout=settings.http_timeout, follow_redirects=True)
    try:
        response = client.get(settings.versions_url)
        response.raise_for_status()
        versions = build_version_choices(response.json())
    except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.warning("could not fetch Laravel versions from %s: %s", settings.versions_url, e)
        return dict(FALLBACK_VERSIONS)
    finally:
        if owns_client:
            client.close()
    return versions or dict(FALLBACK_VERSIONS)
