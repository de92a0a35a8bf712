from __future__ import annotations
import codecs
import gzip, zlib
from typing import Iterable, Optional, Tuple

import brotli

__all__ = [
    "extract_charset",
    "charset_from_encoding",
    "sniff_bom",
    "decompress_transfer",
    "decode_text",
    "is_gzip_magic",
]

DEFAULT_FALLBACK_CHARSETS: Tuple[str, ...] = ("utf-8", "windows-1252", "latin-1")

# Content-Encoding tokens that describe compression rather than a text charset
TRANSFER_CODINGS = frozenset({"gzip", "x-gzip", "deflate", "br", "compress", "identity", "zstd"})

_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def extract_charset(content_type: Optional[str]) -> Optional[str]:
        parts = (content_type or "").split(";")
        for p in parts[1:]:
            p = p.strip()
            if p.lower().startswith("charset="):
                return p.split("=", 1)[1].strip().strip('"\'') or None
        return None

def charset_from_encoding(content_encoding: Optional[str]) -> Optional[str]:
        """Return content_encoding when it names a text codec python knows."""
        if not content_encoding:
            return None
        enc = content_encoding.strip().lower()
        if not enc or any(tok.strip() in TRANSFER_CODINGS for tok in enc.split(",")):
            return None
        try:
            codecs.lookup(enc)
        except LookupError:
            return None
        return enc

def sniff_bom(data: bytes) -> Optional[str]:
        for bom, charset in _BOMS:
            if data.startswith(bom):
                return charset
        return None

def is_gzip_magic(b: bytes) -> bool:
        return len(b) >= 2 and b[0] == 0x1F and b[1] == 0x8B

def decompress_transfer(body: bytes, content_encoding: Optional[str]) -> bytes:
        if not body or not content_encoding:
            return body

        enc = content_encoding.lower()
        try:
            if "gzip" in enc:
                # bodies already inflated by the client keep their header
                return gzip.decompress(body) if is_gzip_magic(body) else body
            if "deflate" in enc:
                # zlib-wrapped per RFC 9110; some servers send raw deflate
                try:
                    return zlib.decompress(body)
                except zlib.error:
                    return zlib.decompress(body, -zlib.MAX_WBITS)
            if "br" in enc:
                return brotli.decompress(body)
        except Exception:
            return body
        return body

def decode_text(
    data: bytes,
    charset: Optional[str],
    fallbacks: Iterable[str] = DEFAULT_FALLBACK_CHARSETS,
    errors: str = "replace",
) -> Tuple[str, Optional[str], Optional[str]]:
        """
        Decode bytes to text.

        Returns (text, charset_used, note). The note is set when the declared
        charset could not be used.
        """
        tried = []
        if charset:
            try:
                return data.decode(charset, errors=errors), charset, None
            except Exception as e:
                tried.append(f"{charset}({e})")
        for ch in fallbacks:
            try:
                return data.decode(ch, errors="strict"), ch, (f"tried={tried}" if tried else None)
            except Exception as e:
                tried.append(f"{ch}({e.__class__.__name__})")
        return data.decode("utf-8", errors="replace"), "utf-8", f"fallback utf-8; tried={tried}"
