"""Locating and serving the dashboard UI and the API UI assets."""

from __future__ import annotations

import logging
import shutil
import ssl
import threading
import urllib.request
from pathlib import Path
from typing import BinaryIO, Callable

log = logging.getLogger(__name__)

JS_ASSET = "/api-ui/ui.min.js"
CSS_ASSET = "/api-ui/ui.min.css"


def _asset_url(source: str, is_release: bool, asset: str) -> str:
    if source == "external" or (source == "auto" and not is_release):
        return ""
    return asset


def js_url(source: str, is_release: bool) -> str:
    """Return the bundled API UI script path, or '' to use the external one."""
    return _asset_url(source, is_release, JS_ASSET)


def css_url(source: str, is_release: bool) -> str:
    """Return the bundled API UI stylesheet path, or '' to use the external one."""
    return _asset_url(source, is_release, CSS_ASSET)


def _insecure_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def serve_index(out: BinaryIO, url: str) -> None:
    """Fetch the URL without verifying TLS and copy its body to out."""
    with urllib.request.urlopen(url, context=_insecure_context()) as response:
        shutil.copyfileobj(response, out)


class _Discard:
    def write(self, data: bytes) -> int:
        return len(data)


class UIHandler:
    """Chooses between a remote index page and the packaged UI."""

    def __init__(
        self,
        index_setting: Callable[[], str],
        path_setting: Callable[[], str],
        offline_setting: Callable[[], str],
        is_release: Callable[[], bool] = lambda: False,
    ) -> None:
        self.index_setting = index_setting
        self.path_setting = path_setting
        self.offline_setting = offline_setting
        self.is_release = is_release
        self._lock = threading.Lock()
        self._download_success: bool | None = None

    def can_download(self, url: str) -> bool:
        """Try the URL once; later calls reuse the first outcome."""
        with self._lock:
            if self._download_success is None:
                try:
                    serve_index(_Discard(), url)
                except (OSError, ValueError):
                    log.error("Failed to download %s, falling back to packaged UI", url)
                    self._download_success = False
                else:
                    self._download_success = True
            return self._download_success

    def path(self) -> tuple[str, bool]:
        """Return where the UI lives and whether that is a URL."""
        mode = self.offline_setting()
        if mode == "auto":
            if self.is_release():
                return self.path_setting(), False
            if self.can_download(self.index_setting()):
                return self.index_setting(), True
            return self.path_setting(), False
        if mode == "bundled":
            return self.path_setting(), False
        return self.index_setting(), True

    def index_file(self, out: BinaryIO) -> None:
        """Write the UI index page to out."""
        location, is_url = self.path()
        if is_url:
            try:
                serve_index(out, location)
            except (OSError, ValueError):
                log.debug("failed to serve index from %s", location)
            return
        with open(Path(location) / "index.html", "rb") as index:
            shutil.copyfileobj(index, out)