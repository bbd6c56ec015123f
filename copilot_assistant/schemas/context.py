from typing import IO, Union

from pydantic import BaseModel, ConfigDict, field_validator


class ContextPayload(BaseModel):
    """
    A piece of injectable context for a turn, identified by `key`
    (usually a file name). Only the first turn of a session that carries
    a given key gets `content` prefixed to its message.
    """

    key: str
    content: str

    model_config = ConfigDict(frozen=True)

    @field_validator("key")
    @classmethod
    def validate_key(cls, v):
        if not v or not v.strip():
            raise ValueError("Context key must be a non-empty string")
        return v

    @classmethod
    def from_handle(
        cls,
        key: str,
        handle: IO[Union[str, bytes]],
        encoding: str = "utf-8",
        errors: str = "strict",
    ) -> "ContextPayload":
        """
        Read the full content of an already-opened file handle.

        Binary content is decoded strictly by default, so a file that is not
        valid in `encoding` raises UnicodeDecodeError. Pass errors="replace"
        to accept lossy decoding instead.
        """
        raw = handle.read()
        if isinstance(raw, bytes):
            raw = raw.decode(encoding, errors=errors)
        return cls(key=key, content=raw)
