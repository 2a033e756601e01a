"""Input/output utilities for JSON answer files and JSONL report logs."""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any


def read_answers(path: Path | str) -> dict[str, Any]:
    """Read a JSON object mapping field names to values.

    Args:
        path: Path to the JSON file.

    Returns:
        The parsed answers.

    Raises:
        ValueError: If the file is not JSON or not a JSON object.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object of field answers in {path}")
    return data


def read_jsonl(path: Path | str) -> Iterator[dict[str, Any]]:
    """Yield each row of a JSONL report log, skipping blank lines.

    Raises:
        ValueError: If a line is not valid JSON. The message names the
            file and the 1-based line number.
    """
    with open(path, encoding="utf-8") as f:
        for number, text in enumerate(f, 1):
            if text.isspace():
                continue
            try:
                yield json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {path} on line {number}: {e.msg}") from e


def write_jsonl(
    path: Path | str, records: Iterable[dict[str, Any]], append: bool = False
) -> int:
    """Write records to a JSONL report log, one JSON object per line.

    Args:
        path: Path to the log.
        records: Rows to write.
        append: Add to the end of the log instead of replacing it.

    Returns:
        Number of records written.
    """
    lines = [json.dumps(record, ensure_ascii=False) + "\n" for record in records]
    with open(path, "a" if append else "w", encoding="utf-8") as f:
        f.writelines(lines)
    return len(lines)
