import hashlib
from pathlib import Path
from typing import Optional, Union

import requests

DEFAULT_HEADERS = {
    "User-Agent": "devinstaller/0.1"
}
CHUNK_SIZE = 64 * 1024


class FetchError(Exception):
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


def fetch_text(url: str, timeout: float = 15, session: Optional[requests.Session] = None) -> str:
    http = session or requests
    try:
        r = http.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e
    return r.text


def fetch_file(
    url: str,
    dest: Union[str, Path],
    timeout: float = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """Stream ``url`` into ``dest`` and return the written path."""
    http = session or requests
    dest = Path(dest)
    try:
        with http.get(url, headers=DEFAULT_HEADERS, timeout=timeout, stream=True) as r:
            r.raise_for_status()
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, 'wb') as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except requests.RequestException as e:
        raise FetchError(url, str(e)) from e
    return dest


def file_digest(path: Union[str, Path], algorithm: str = 'sha384') -> str:
    h = hashlib.new(algorithm)
    with open(path, 'rb') as f:
        for block in iter(lambda: f.read(CHUNK_SIZE), b''):
            h.update(block)
    return h.hexdigest()


def verify_digest(path: Union[str, Path], expected: str, algorithm: str = 'sha384') -> bool:
    return file_digest(path, algorithm) == expected.strip().lower()
