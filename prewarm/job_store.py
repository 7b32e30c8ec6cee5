"""
Job record access.
The dispatcher creates <RUNNING_DIR>/<job-id>.job before starting a worker
and reads it to show progress. This module only ever rewrites the counter
fields already present in that JSON record; it never creates, deletes or
reads back the record for its own decisions.
"""

import json
import logging
from pathlib import Path

from prewarm.config import RUNNING_DIR

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("progress", "total", "hit", "miss", "expired", "failed")


def _detect_indent(text):
    """Indent used by a pretty-printed record, None for a single-line one."""
    for line in text.splitlines()[1:]:
        stripped = line.lstrip(" \t")
        if stripped and stripped != line:
            whitespace = line[:len(line) - len(stripped)]
            return "\t" if "\t" in whitespace else len(whitespace)
    return None


class JobFile:
    """Partial, structure-preserving updates of one job record."""

    def __init__(self, job_id, running_dir=RUNNING_DIR):
        self.job_id = job_id
        self.path = Path(running_dir) / f"{job_id}.job"

    def update(self, counters):
        """
        Replace the values of the known counter fields present in the record.
        Unknown fields, key order and layout are kept.
        Returns True if the record was rewritten; a missing or malformed
        record is skipped silently.
        """
        try:
            # r+ so a record removed by the dispatcher is never recreated
            with open(self.path, "r+", encoding="utf-8") as f:
                text = f.read()
                record = json.loads(text)
                if not isinstance(record, dict):
                    logger.debug(f"job record {self.path} is not a JSON object, skipping update")
                    return False

                for field in COUNTER_FIELDS:
                    if field in record and field in counters:
                        record[field] = int(counters[field])

                content = json.dumps(record, indent=_detect_indent(text), ensure_ascii=False)
                if text.endswith("\n"):
                    content += "\n"
                f.seek(0)
                f.write(content)
                f.truncate()
            return True
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as e:
            logger.debug(f"job record update skipped for {self.path}: {e}")
            return False
