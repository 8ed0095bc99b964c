"""Tests for slot validators and the information-collection step."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from dialogue.errors import ValidationFailure
from dialogue.models.session import Language, UserInfo
from dialogue.normalize import normalize
from dialogue.slot_filling import fill_next_slot, prompt_keys
from dialogue.validators import (
    REQUIREMENT_CHOICES,
    parse_requirement_choice,
    validate_name,
    validate_phone,
    validate_preferred_time,
)

from conftest import make_property, make_session


# ── Validators ─────────────────────────────────────────────────────

class TestName:
    def test_plain_name(self):
        assert validate_name("Rahul Patil") == "Rahul Patil"

    def test_label_stripped(self):
        assert validate_name("Name: Priya") == "Priya"
        assert validate_name("नाव: सुनील") == "सुनील"

    def test_too_short(self):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_name("A")
        assert exc_info.value.message_key == "invalid_name"

    def test_digits_only_rejected(self):
        with pytest.raises(ValidationFailure):
            validate_name("12345")

    def test_configurable_minimum(self):
        with pytest.raises(ValidationFailure):
            validate_name("Raj", min_length=4)


class TestPhone:
    @pytest.mark.parametrize("text", [
        "9876543210",
        "98765 43210",
        "+91 98765-43210",
        "919876543210",
        "09876543210",
        "Phone: 9876543210",
        "mobile no. (987) 654-3210",
        "९८७६५४३२१०",
    ])
    def test_accepted(self, text):
        assert validate_phone(text) == "9876543210"

    @pytest.mark.parametrize("text", [
        "12345",
        "my number",
        "98765432101234",
        "9876543210 or 9123456780",
    ])
    def test_rejected(self, text):
        with pytest.raises(ValidationFailure) as exc_info:
            validate_phone(text)
        assert exc_info.value.message_key == "invalid_phone"


class TestPreferredTime:
    def test_kept_verbatim(self):
        assert validate_preferred_time("Tomorrow evening") == "Tomorrow evening"

    def test_weekday_appended(self):
        assert validate_preferred_time("25/12/2026 at 11 AM") == "25/12/2026 at 11 AM (Friday)"

    def test_weekday_in_marathi(self):
        result = validate_preferred_time("25/12/2026", Language.MARATHI)
        assert result == "25/12/2026 (शुक्रवार)"

    def test_invalid_date_left_alone(self):
        assert validate_preferred_time("31/02/2026") == "31/02/2026"

    def test_empty_after_label(self):
        with pytest.raises(ValidationFailure):
            validate_preferred_time("Time: ")


class TestRequirementChoice:
    def test_digit(self):
        assert parse_requirement_choice("3") == 3

    def test_word(self):
        assert parse_requirement_choice("need a loan") == 2

    def test_unknown(self):
        with pytest.raises(ValidationFailure):
            parse_requirement_choice("maybe")


# ── Slot filling ───────────────────────────────────────────────────

def _collecting_session(**info):
    return make_session(
        state="collect_info",
        selected_property=make_property(),
        user_info=UserInfo(**info),
    )


class TestFillNextSlot:
    def test_slots_fill_in_order(self):
        session = _collecting_session()

        outcome = fill_next_slot(session, normalize("Rahul Patil"))
        assert session.user_info.name == "Rahul Patil"
        assert outcome.message_keys == ["ask_phone"]

        outcome = fill_next_slot(session, normalize("9876543210"))
        assert session.user_info.phone == "9876543210"
        assert outcome.message_keys == ["ask_time"]

        outcome = fill_next_slot(session, normalize("Monday 4 PM"))
        assert session.user_info.preferred_time_raw == "Monday 4 PM"
        assert outcome.message_keys == ["ask_requirements"]

        outcome = fill_next_slot(session, normalize("1"))
        assert session.user_info.special_requirements == REQUIREMENT_CHOICES[1]
        assert outcome.complete

    def test_invalid_input_writes_nothing(self):
        session = _collecting_session(name="Rahul")
        outcome = fill_next_slot(session, normalize("call me"))
        assert session.user_info.phone is None
        assert outcome.message_keys == ["invalid_phone"]
        assert not outcome.complete

    def test_invalid_requirement_reshows_menu(self):
        session = _collecting_session(name="Rahul", phone="9876543210", preferred_time_raw="Monday")
        outcome = fill_next_slot(session, normalize("hmm"))
        assert outcome.message_keys == ["invalid_choice", "ask_requirements"]

    def test_other_requirement_asks_for_details(self):
        session = _collecting_session(name="Rahul", phone="9876543210", preferred_time_raw="Monday")
        outcome = fill_next_slot(session, normalize("5"))
        assert outcome.message_keys == ["ask_requirement_details"]
        assert session.user_info.awaiting_freeform_requirement
        assert prompt_keys(session) == ["ask_requirement_details"]

        outcome = fill_next_slot(session, normalize("Need a loading dock"))
        assert outcome.complete
        assert session.user_info.special_requirements == "Need a loading dock"
        assert not session.user_info.awaiting_freeform_requirement

    def test_all_filled_is_complete(self):
        session = _collecting_session(
            name="Rahul", phone="9876543210", preferred_time_raw="Monday", special_requirements="None",
        )
        assert fill_next_slot(session, normalize("anything")).complete

    def test_name_keeps_original_casing(self):
        session = _collecting_session()
        fill_next_slot(session, normalize("  PRIYA   Deshmukh "))
        assert session.user_info.name == "PRIYA Deshmukh"
