"""Lossless Windows-1252 codec for propdump text.

WHY: Propdump files are written in the Windows-1252 code page and their
length indicators count bytes of that encoding. The decoder splits the
decoded line on spaces and then re-encodes the trailing token to slice
blobs by byte count, so decode → encode must reproduce every byte exactly.
Python's built-in "cp1252" codec rejects the five byte values the code
page leaves undefined, which would make valid propdump lines fail.

HOW: A 256-entry decoding table is derived from the built-in cp1252 codec,
with the undefined bytes (0x81, 0x8D, 0x8F, 0x90, 0x9D) mapped to the C1
control character of the same code point. The table is compiled with
codecs.charmap_build — the same mechanism the stdlib encodings modules
use — and registered in the codec registry as "aw-cp1252".

RULES:
- Every byte 0x00–0xFF decodes to exactly one character and back
- LegacyCodec is the injectable byte↔text capability used by the decoder
- register_codec() is idempotent and runs on import
"""

from __future__ import annotations

import codecs

CODEC_NAME = "aw-cp1252"


def _build_decoding_table() -> str:
    chars = []
    for value in range(256):
        try:
            chars.append(bytes([value]).decode("cp1252"))
        except UnicodeDecodeError:
            # undefined in Windows-1252; pass through as C1 control
            chars.append(chr(value))
    return "".join(chars)


DECODING_TABLE = _build_decoding_table()
ENCODING_TABLE = codecs.charmap_build(DECODING_TABLE)


class LegacyCodec:
    """Byte↔text conversion for the propdump code page.

    Instances are stateless; the module-level LEGACY_CODEC is shared.
    """

    name = CODEC_NAME

    def decode(self, data: bytes | bytearray | memoryview) -> str:
        return codecs.charmap_decode(bytes(data), "strict", DECODING_TABLE)[0]

    def encode(self, text: str) -> bytes:
        return codecs.charmap_encode(text, "strict", ENCODING_TABLE)[0]


LEGACY_CODEC = LegacyCodec()


def _codec_encode(text, errors="strict"):
    return codecs.charmap_encode(text, errors, ENCODING_TABLE)


def _codec_decode(data, errors="strict"):
    return codecs.charmap_decode(data, errors, DECODING_TABLE)


def _search(name: str) -> codecs.CodecInfo | None:
    if name.replace("_", "-") != CODEC_NAME:
        return None
    return codecs.CodecInfo(
        name=CODEC_NAME,
        encode=_codec_encode,
        decode=_codec_decode,
    )


_registered = False


def register_codec() -> None:
    """Make "aw-cp1252" available to bytes.decode() / str.encode()."""
    global _registered
    if _registered:
        return
    codecs.register(_search)
    _registered = True


register_codec()
