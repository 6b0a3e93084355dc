"""Codec configuration.

This module provides the configuration dataclass shared by the Encoder, the
Decoder and the Value transcoding functions.
"""

from __future__ import annotations

from dataclasses import dataclass

TEXT_ERROR_HANDLERS = ("strict", "replace", "ignore", "surrogateescape", "backslashreplace")


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for encoding and decoding.

    Attributes:
        max_depth: Maximum container nesting accepted by ``decode_value`` and
            ``encode_value`` (default 256). Deeper input raises
            RecursionLimitExceededError instead of exhausting the call stack.

        strict_ext_type: Reject timestamp extensions whose type identifier is
            not -1 (default True). When False the identifier is read and ignored.

        bin_text_errors: Error handler used when a bin payload is turned into a
            ``Value`` string (default "strict"). Typical values:
            - "strict": invalid UTF-8 raises TextEncodingError
            - "replace": invalid sequences become U+FFFD
            - "surrogateescape": invalid bytes are kept as lone surrogates

    Examples:
        ```python
        from valuepack import CodecConfig, bytes_to_value

        # Shallow documents only
        config = CodecConfig(max_depth=16)

        # Accept binary blobs that are not text
        config = CodecConfig(bin_text_errors="replace")

        value = bytes_to_value(data, config=config)
        ```
    """

    max_depth: int = 256
    strict_ext_type: bool = True
    bin_text_errors: str = "strict"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")

        if self.bin_text_errors not in TEXT_ERROR_HANDLERS:
            raise ValueError(
                f"bin_text_errors must be one of {', '.join(TEXT_ERROR_HANDLERS)}, "
                f"got {self.bin_text_errors!r}"
            )


DEFAULT_CONFIG = CodecConfig()
