import os
import json
from collections.abc import Mapping
from ..logging import log


def serialize_record(record) -> str:
    """
    str      -> verbatim (block hashes)
    Mapping  -> compact JSON, key order preserved
    """
    if isinstance(record, str):
        return record
    if isinstance(record, Mapping):
        return json.dumps(dict(record), separators=(",", ":"), ensure_ascii=False)
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


class FileAppender:
    """
    Append-only, newline-delimited writer.

    Each append opens, writes and closes the file, so every line written
    before a later failure is already on disk. Nothing is ever truncated.
    """

    def __init__(self, path: str, ensure_directory: bool = False):
        self.path = path
        self.ensure_directory = ensure_directory

    def append(self, record):
        line = serialize_record(record) + "\n"
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)

    def append_all(self, records) -> int:
        if self.ensure_directory:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)

        count = 0
        for record in records:
            self.append(record)
            count += 1

        log.debug("records_appended", extra={"path": self.path, "count": count})
        return count
