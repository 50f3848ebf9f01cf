"""Runtime discovery of the HLTB search endpoint and Next.js build id.

HLTB renames its search API with front-end deployments. The current
path is recovered by scanning the site's own chunk bundles for a
``fetch("/api/<name>", {method: "POST"})`` call; the build id needed for
game data routes is read from the manifest script paths on the homepage.
Discovery never raises: the search URL degrades to a static fallback
and a missing build id is reported as None.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from hltb_lookup.core.session_state import SessionState

logger = logging.getLogger("hltblookup.hltb_discovery")

__all__ = ["EndpointDiscovery", "FALLBACK_SEARCH_PATH", "SKIP_ENDPOINTS"]

FALLBACK_SEARCH_PATH = "api/search"

# Known non-search API endpoints
SKIP_ENDPOINTS = frozenset({"find", "error", "user", "logout"})

_CHUNK_PATH_PATTERN = re.compile(r"/_next/static/chunks/[^\"'\s?#]+\.js$")

# Quoted chunk path inside an inline script
_CHUNK_LITERAL_PATTERN = re.compile(r"""["'`](/_next/static/chunks/[^"'`\s?#]+\.js)["'`]""")

# Quoted "/api/<name>" literal inside a bundle
_API_LITERAL_PATTERN = re.compile(r"""["'`](/api/([A-Za-z0-9_]+))["'`]""")

# Manifest scripts carry the build id: /_next/static/<buildId>/_ssgManifest.js
_BUILD_ID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"/_next/static/([^/\"'\s]+)/_ssgManifest\.js"),
    re.compile(r"/_next/static/([^/\"'\s]+)/_buildManifest\.js"),
)


def _post_call_pattern(api_path: str) -> re.Pattern[str]:
    """Builds the regex for ``fetch("<api_path>", {... method: "POST" ...})``."""
    return re.compile(
        r"fetch\s*\(\s*[\"'`]" + re.escape(api_path) + r"[\"'`]\s*,\s*\{[^}]*?method\s*:\s*[\"']POST[\"']"
    )


class EndpointDiscovery:
    """Discovers and caches the live search URL and build id.

    Args:
        state: Shared session state that stores discovered values.
    """

    def __init__(self, state: SessionState) -> None:
        self._state = state

    @property
    def fallback_search_url(self) -> str:
        """Known-good search URL used when discovery fails."""
        return self._state.base_url + FALLBACK_SEARCH_PATH

    def get_homepage(self) -> str | None:
        """Returns the HLTB homepage HTML, fetching it on first use.

        Only a successful response is cached.

        Returns:
            Homepage HTML, or None if it could not be fetched.
        """
        state = self._state
        with state.lock:
            if state.homepage_html is not None:
                return state.homepage_html

            logger.info("Fetching HLTB homepage...")
            try:
                resp = state.session.get(
                    state.base_url,
                    headers={"Referer": state.base_url},
                    timeout=state.timeout,
                )
            except requests.RequestException as exc:
                logger.warning("Failed to fetch HLTB homepage: %s", exc)
                return None

            if resp.status_code != 200:
                logger.warning("HLTB homepage returned HTTP %d", resp.status_code)
                return None

            state.homepage_html = resp.text
            return state.homepage_html

    def resolve_search_endpoint(self) -> str:
        """Returns the search URL, discovering it on first use.

        The discovered URL, or the fallback when nothing is found, is
        cached until the session is invalidated.

        Returns:
            Absolute search URL.
        """
        state = self._state
        with state.lock:
            if state.search_url is not None:
                return state.search_url

            path = self._extract_search_path()
            if path:
                state.search_url = state.base_url + path
                logger.info("HLTB search URL: %s", state.search_url)
            else:
                state.search_url = self.fallback_search_url
                logger.info("Using fallback HLTB search URL: %s", state.search_url)
            return state.search_url

    def resolve_build_id(self) -> str | None:
        """Returns the Next.js build id, extracting it on first use.

        Returns:
            Build id, or None if the homepage is unavailable or carries
            no manifest script.
        """
        state = self._state
        with state.lock:
            if state.build_id is not None:
                return state.build_id

            homepage = self.get_homepage()
            if not homepage:
                return None

            build_id = self.extract_build_id(homepage)
            if build_id:
                logger.info("Found HLTB build id: %s", build_id)
                state.build_id = build_id
            else:
                logger.info("Could not find HLTB build id")
            return build_id

    @staticmethod
    def extract_build_id(homepage_html: str) -> str | None:
        """Extracts the build id from manifest script paths.

        Args:
            homepage_html: The HLTB homepage HTML.

        Returns:
            Build id string, or None if no manifest path is present.
        """
        for pattern in _BUILD_ID_PATTERNS:
            match = pattern.search(homepage_html)
            if match:
                return match.group(1)
        return None

    @staticmethod
    def find_chunk_paths(homepage_html: str) -> list[str]:
        """Collects chunk bundle paths referenced by the homepage.

        Covers ``<script src>`` / ``<link href>`` attributes and quoted
        chunk paths inside inline scripts.

        Args:
            homepage_html: The HLTB homepage HTML.

        Returns:
            Unique ``/_next/static/chunks/*.js`` references in page order.
        """
        soup = BeautifulSoup(homepage_html, "html.parser")
        paths: list[str] = []
        for tag in soup.find_all(["script", "link"]):
            ref = str(tag.get("src") or tag.get("href") or "")
            if _CHUNK_PATH_PATTERN.search(ref) and ref not in paths:
                paths.append(ref)

        for script in soup.find_all("script", src=False):
            for ref in _CHUNK_LITERAL_PATTERN.findall(script.get_text()):
                if ref not in paths:
                    paths.append(ref)

        paths.sort(key=homepage_html.find)
        return paths

    @staticmethod
    def find_post_endpoint(js_text: str) -> str | None:
        """Finds the first API path used as the target of a POST fetch.

        Args:
            js_text: Body of one chunk bundle.

        Returns:
            Path such as ``api/finder`` (no leading slash), or None.
        """
        checked: set[str] = set()
        for match in _API_LITERAL_PATTERN.finditer(js_text):
            api_path, name = match.group(1), match.group(2)
            if name in checked:
                continue
            checked.add(name)

            if name in SKIP_ENDPOINTS:
                logger.debug("Skipping endpoint: %s", api_path)
                continue
            if _post_call_pattern(api_path).search(js_text):
                return api_path.lstrip("/")
            logger.debug("Endpoint %s not used with POST", api_path)
        return None

    def _extract_search_path(self) -> str | None:
        """Scans chunk bundles for the search endpoint.

        Returns:
            Path such as ``api/finder``, or None when nothing verified.
        """
        homepage = self.get_homepage()
        if not homepage:
            return None

        chunk_paths = self.find_chunk_paths(homepage)
        logger.debug("Found %d chunk script(s)", len(chunk_paths))

        state = self._state
        for chunk_path in chunk_paths:
            url = urljoin(state.base_url, chunk_path)
            try:
                resp = state.session.get(url, headers={"Referer": state.base_url}, timeout=state.timeout)
            except requests.RequestException as exc:
                logger.debug("Skipping chunk %s: %s", url, exc)
                continue
            if resp.status_code != 200 or not resp.text:
                continue

            path = self.find_post_endpoint(resp.text)
            if path:
                logger.info("Found HLTB search endpoint /%s in %s", path, chunk_path)
                return path

        logger.warning("No HLTB search endpoint found in %d chunk script(s)", len(chunk_paths))
        return None
