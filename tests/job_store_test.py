import json
import tempfile
import unittest
from pathlib import Path

from prewarm.job_store import JobFile

COUNTERS = {"progress": 5, "total": 9, "hit": 2, "miss": 1, "expired": 1, "failed": 1}


class TestJobFile(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.running = Path(self.tmp.name)
        self.job = JobFile("job-42", running_dir=self.running)

    def tearDown(self):
        self.tmp.cleanup()

    def write_record(self, text):
        self.job.path.write_text(text, encoding="utf-8")

    def test_path_follows_job_id(self):
        self.assertEqual(self.job.path, self.running / "job-42.job")

    def test_updates_counters_and_keeps_other_fields(self):
        record = {
            "id": "job-42",
            "url": "https://cdn.example.com/master.m3u8",
            "status": "running",
            "progress": 0, "total": 0, "hit": 0, "miss": 0, "expired": 0, "failed": 0,
            "started": "2026-10-19T10:00:00Z",
        }
        self.write_record(json.dumps(record, indent=2) + "\n")

        self.assertTrue(self.job.update(COUNTERS))

        text = self.job.path.read_text(encoding="utf-8")
        updated = json.loads(text)
        self.assertEqual(list(updated), list(record))
        self.assertEqual(updated["status"], "running")
        self.assertEqual(updated["started"], "2026-10-19T10:00:00Z")
        for field, value in COUNTERS.items():
            self.assertEqual(updated[field], value)
        self.assertTrue(text.endswith("}\n"))
        self.assertIn('\n  "progress": 5,', text)

    def test_single_line_record_stays_single_line(self):
        self.write_record('{"id": "job-42", "progress": 0, "total": 0}')

        self.job.update(COUNTERS)

        self.assertEqual(self.job.path.read_text(encoding="utf-8"), '{"id": "job-42", "progress": 5, "total": 9}')

    def test_absent_fields_are_not_added(self):
        self.write_record('{"progress": 1}')
        self.job.update(COUNTERS)
        self.assertEqual(json.loads(self.job.path.read_text(encoding="utf-8")), {"progress": 5})

    def test_missing_record_is_a_noop(self):
        self.assertFalse(self.job.path.exists())
        self.assertFalse(self.job.update(COUNTERS))
        self.assertFalse(self.job.path.exists())

    def test_malformed_record_is_left_alone(self):
        self.write_record('{"progress": 1, oops')
        self.assertFalse(self.job.update(COUNTERS))
        self.assertEqual(self.job.path.read_text(encoding="utf-8"), '{"progress": 1, oops')

    def test_non_object_record_is_left_alone(self):
        self.write_record('[1, 2, 3]')
        self.assertFalse(self.job.update(COUNTERS))
        self.assertEqual(self.job.path.read_text(encoding="utf-8"), '[1, 2, 3]')


if __name__ == "__main__":
    unittest.main()
