"""
Tests for teamate.utils.logger: audit entries and the logger mixin.
"""

from loguru import logger

from teamate.utils.logger import LoggerMixin, audit_log, format_audit_details


class TestFormatAuditDetails:
    def test_key_value_pairs_in_order(self):
        details = {"total_matches": 2, "seekers": 3, "providers": 2}
        assert format_audit_details(details) == "total_matches=2 seekers=3 providers=2"

    def test_floats_at_four_decimals(self):
        assert format_audit_details({"average_score": 0.87654321}) == "average_score=0.8765"

    def test_empty(self):
        assert format_audit_details({}) == ""


class TestAuditLog:
    def test_binds_audit_type(self):
        records = []
        sink_id = logger.add(records.append, level="INFO", filter=lambda r: "audit_type" in r["extra"])
        try:
            audit_log("pair_scored", {"left_id": "A", "final_score": 0.7}, audit_type="SCORING")
        finally:
            logger.remove(sink_id)

        assert len(records) == 1
        record = records[0].record
        assert record["extra"]["audit_type"] == "SCORING"
        assert record["message"] == "pair_scored | left_id=A final_score=0.7000"


class TestLoggerMixin:
    def test_logger_is_cached(self):
        class Worker(LoggerMixin):
            pass

        worker = Worker()
        assert worker.logger is worker.logger
