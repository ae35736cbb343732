"""Request schema validation: camelCase wire names and field rules."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from app.modules.songs.schemas import SongCreate
from app.modules.suggestion_slots.schemas import SuggestionSlotCreate
from app.modules.assignments.schemas import AssignmentsUpsert
from app.modules.services.schemas import ServiceCreate

SET_ID = "11111111-1111-4111-8111-111111111111"
USER_ID = "22222222-2222-4222-8222-222222222222"


def test_camel_case_and_snake_case_are_both_accepted():
    camel = SongCreate.model_validate({"title": "Holy", "familiarityScore": 10})
    snake = SongCreate.model_validate({"title": "Holy", "familiarity_score": 10})
    assert camel.familiarity_score == snake.familiarity_score == 10


def test_song_familiarity_bounds():
    with pytest.raises(ValidationError):
        SongCreate(title="Holy", familiarity_score=101)
    assert SongCreate(title="Holy").familiarity_score == 50


def test_slot_rejects_min_above_max():
    with pytest.raises(ValidationError):
        SuggestionSlotCreate(set_id=SET_ID, assigned_user_id=USER_ID, min_songs=3, max_songs=2, due_at=datetime.now())


def test_slot_rejects_zero_songs():
    with pytest.raises(ValidationError):
        SuggestionSlotCreate(set_id=SET_ID, assigned_user_id=USER_ID, min_songs=0, max_songs=2, due_at=datetime.now())


def test_slot_rejects_non_timestamp_due_date():
    with pytest.raises(ValidationError):
        SuggestionSlotCreate.model_validate(
            {"setId": SET_ID, "assignedUserId": USER_ID, "minSongs": 1, "maxSongs": 2, "dueAt": "next friday"}
        )


def test_bulk_assignments_accept_blank_user():
    data = AssignmentsUpsert.model_validate({"assignments": {SET_ID: "", USER_ID: None}})
    assert data.assignments[SET_ID] == ""


def test_bulk_assignments_reject_bad_ids():
    with pytest.raises(ValidationError):
        AssignmentsUpsert.model_validate({"assignments": {"drums": USER_ID}})


def test_service_type_id_must_be_uuid():
    with pytest.raises(ValidationError):
        ServiceCreate.model_validate({"date": "2030-01-06T10:00:00Z", "serviceTypeId": "not-a-valid-uuid"})
