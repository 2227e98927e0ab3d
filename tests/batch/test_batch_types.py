"""Tests for batch/types.py: payload normalization, data variants, summary."""

import pytest

from fitconnect.batch.types import (
    AddChallengeData,
    AssignPlanData,
    BatchOperationPayload,
    BatchOperationResult,
    BatchOperationSummary,
    BatchOperationType,
    SendMessageData,
    UpdateStatusData,
    parse_operation_data,
)
from fitconnect.exceptions import MissingFieldError


class TestPayload:
    def test_type_from_string(self):
        p = BatchOperationPayload(type="update_status", target_ids=("c1",), data=None)
        assert p.type is BatchOperationType.UPDATE_STATUS
        assert p.target_ids == ["c1"]
        assert p.data == {}

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            BatchOperationPayload(type="delete_everything", target_ids=[])

    def test_target_ids_not_deduplicated(self):
        p = BatchOperationPayload(type="send_message", target_ids=["c1", "c1", "c2"])
        assert p.target_ids == ["c1", "c1", "c2"]


class TestParseOperationData:
    def test_variants(self):
        assert parse_operation_data(
            BatchOperationType.ASSIGN_PLAN, {"plan_id": "p1", "start_date": "2026-11-01"}
        ) == AssignPlanData(plan_id="p1", start_date="2026-11-01")
        assert parse_operation_data(
            BatchOperationType.SEND_MESSAGE, {"message": "hi"}
        ) == SendMessageData(message="hi")
        assert parse_operation_data(
            BatchOperationType.UPDATE_STATUS, {"status": "paused"}
        ) == UpdateStatusData(status="paused")
        assert parse_operation_data(
            BatchOperationType.ADD_CHALLENGE, {"challenge_id": "ch"}
        ) == AddChallengeData(challenge_id="ch")

    @pytest.mark.parametrize(
        "op_type, field, message",
        [
            ("assign_plan", "plan_id", "A plan must be selected"),
            ("send_message", "message", "Message content is required"),
            ("update_status", "status", "A status must be selected"),
            ("add_habit", "habit_template_id", "A habit template must be selected"),
            ("add_challenge", "challenge_id", "A challenge must be selected"),
        ],
    )
    def test_missing_field(self, op_type, field, message):
        with pytest.raises(MissingFieldError) as exc_info:
            parse_operation_data(BatchOperationType(op_type), {})
        assert exc_info.value.field == field
        assert str(exc_info.value) == message

    def test_blank_message_is_missing(self):
        with pytest.raises(MissingFieldError):
            parse_operation_data(BatchOperationType.SEND_MESSAGE, {"message": "   "})


class TestSummary:
    def _results(self, *flags):
        return [BatchOperationResult(target_id=f"c{i}", success=f) for i, f in enumerate(flags)]

    def test_counts_are_consistent(self):
        summary = BatchOperationSummary.from_results(self._results(True, False, True))
        assert summary.total == 3
        assert summary.successful + summary.failed == summary.total
        assert summary.failed == 1

    @pytest.mark.parametrize(
        "flags, outcome",
        [
            ((), "success"),
            ((True, True), "success"),
            ((False,), "error"),
            ((True, False), "partial"),
        ],
    )
    def test_outcome(self, flags, outcome):
        assert BatchOperationSummary.from_results(self._results(*flags)).outcome == outcome
