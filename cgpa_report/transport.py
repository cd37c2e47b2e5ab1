import base64
import binascii
import gzip
import json
import zlib

from .app_logger import get_logger
from .config import TEXT_ENCODINGS
from .errors import TransportError

log = get_logger("transport")


# ------------------------
# base64url + gzip
# ------------------------
def _to_standard_b64(s: str) -> str:
    b64 = s.strip().replace("-", "+").replace("_", "/")
    pad = len(b64) % 4
    if pad:
        b64 += "=" * (4 - pad)
    return b64


def decode_transport(s: str) -> bytes:
    """
    Undo the app's share encoding: base64url (padding optional), then gzip.
    Standard base64 input is accepted as well.
    """
    try:
        compressed = base64.b64decode(_to_standard_b64(s), validate=True)
    except (binascii.Error, ValueError) as e:
        raise TransportError(f"base64 decoding failed: {e}") from e

    if not compressed:
        raise TransportError("gzip decompression failed: empty stream")

    try:
        data = gzip.decompress(compressed)
    except (OSError, EOFError, zlib.error) as e:
        raise TransportError(f"gzip decompression failed: {e}") from e

    log.debug("decoded %d encoded chars into %d bytes", len(s), len(data))
    return data


def encode_transport(data: bytes) -> str:
    # mtime=0 keeps the output stable for identical input
    compressed = gzip.compress(data, mtime=0)
    return base64.urlsafe_b64encode(compressed).rstrip(b"=").decode("ascii")


# ------------------------
# Text helpers
# ------------------------
def bytes_to_text(data: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            log.info("payload is not valid %s, trying the next encoding", encoding)
    raise TransportError("payload bytes are not text in any supported encoding")


def encode_json(obj) -> str:
    text = json.dumps(obj, ensure_ascii=False, separators=(",", ":"))
    return encode_transport(text.encode("utf-8"))
