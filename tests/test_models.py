# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the row, draft and payload models:
# - Rows from the backend are parsed leniently (ids, dates, legacy columns)
# - Drafts only become payloads when required fields are filled in
# - Console drafts are replaced, never mutated
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from core.models import (
    ConsoleDrafts,
    ConsoleState,
    ContentCategory,
    Event,
    EventDraft,
    EventView,
    Member,
    MemberCategory,
    MemberDraft,
    Notice,
    NoticeDraft,
    is_image_name,
    is_video_name,
    parse_day,
)


# =============================================================================
# Shared Field Types
# =============================================================================

class TestParseDay:
    """Tests for parse_day()."""

    def test_plain_date_string(self):
        assert parse_day("2025-03-14") == date(2025, 3, 14)

    def test_timestamp_drops_time_of_day(self):
        """The calendar day is taken as written, not converted to UTC."""
        assert parse_day("2025-03-14T23:30:00+05:30") == date(2025, 3, 14)

    @pytest.mark.parametrize("value", [
        "2025-03-14T18:30:00Z",
        "2025-03-14 18:30:00",
        "2025-03-14T18:30:00.123456+00:00",
    ])
    def test_supabase_timestamp_formats(self, value):
        assert parse_day(value) == date(2025, 3, 14)

    def test_datetime_and_date_objects(self):
        assert parse_day(datetime(2025, 3, 14, 9, 0)) == date(2025, 3, 14)
        assert parse_day(date(2025, 3, 14)) == date(2025, 3, 14)

    @pytest.mark.parametrize("value", [
        "", "soon", "14/03/2025", None, 20250314,
        "2025-03-1499", "2025-03-14T99:99:99", "2025-03-14 garbage",
    ])
    def test_unparseable_values_raise(self, value):
        with pytest.raises(ValueError):
            parse_day(value)


# =============================================================================
# Notices
# =============================================================================

class TestNotice:
    """Tests for Notice and NoticeDraft."""

    def test_integer_id_is_kept_as_string(self):
        notice = Notice(id=42, content="Exam schedule released")

        assert notice.id == "42"
        assert notice.is_active is True

    def test_draft_payload_stores_blank_link_as_null(self):
        # Arrange: A filled form without a link
        draft = NoticeDraft(content="Exam schedule released")

        # Act
        payload = draft.to_payload()

        # Assert
        assert payload == {"content": "Exam schedule released", "link_url": None, "is_active": True}

    def test_draft_without_content_is_rejected(self):
        with pytest.raises(ValidationError):
            NoticeDraft(content="   ").to_payload()

    def test_draft_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            NoticeDraft(title="not a notice field")


# =============================================================================
# Events
# =============================================================================

class TestEvent:
    """Tests for Event and EventDraft."""

    def test_event_date_is_reduced_to_day(self):
        event = Event(id="e1", title="Hackathon", event_date="2025-03-14T18:30:00Z")

        assert event.event_date == date(2025, 3, 14)

    def test_legacy_summary_link_is_read_as_summary_text(self):
        event = Event.model_validate(
            {"id": "e1", "title": "Tech Fest", "event_date": "2025-04-02", "summary_link": "Great turnout"}
        )

        assert event.summary_text == "Great turnout"
        assert event.has_summary is True

    def test_blank_summary_is_not_a_summary(self):
        event = Event(id="e1", title="Tech Fest", event_date="2025-04-02", summary_text="  ")

        assert event.has_summary is False

    def test_unparseable_date_is_rejected(self):
        with pytest.raises(ValidationError):
            Event(id="e1", title="Someday", event_date="TBD")

    def test_draft_payload(self):
        draft = EventDraft(title="Hackathon", event_date="2025-03-14", location="Lab 2")

        payload = draft.to_payload()

        assert payload["title"] == "Hackathon"
        assert payload["event_date"] == "2025-03-14"
        assert payload["location"] == "Lab 2"
        assert payload["description"] is None
        assert payload["summary_text"] is None

    @pytest.mark.parametrize("fields", [
        {"title": "", "event_date": "2025-03-14"},
        {"title": "Hackathon", "event_date": ""},
        {"title": "Hackathon", "event_date": "next week"},
    ])
    def test_draft_requires_title_and_date(self, fields):
        with pytest.raises(ValidationError):
            EventDraft(**fields).to_payload()

    def test_event_view_values(self):
        assert EventView("upcoming") == EventView.UPCOMING
        assert EventView("past") == EventView.PAST


# =============================================================================
# Members
# =============================================================================

class TestMember:
    """Tests for Member and MemberDraft."""

    @pytest.mark.parametrize("category", [None, "", "  "])
    def test_missing_category_means_student(self, category):
        member = Member(id=1, name="Asha", role="President", rank=3, category=category)

        assert member.category == MemberCategory.STUDENT

    @pytest.mark.parametrize("rank", [0, 8, -1])
    def test_rank_outside_range_is_rejected(self, rank):
        with pytest.raises(ValidationError):
            Member(id=1, name="Asha", role="President", rank=rank)

    def test_null_role_becomes_empty(self):
        member = Member(id=1, name="Asha", role=None, rank=3)

        assert member.role == ""

    def test_draft_coerces_rank_from_form_text(self):
        draft = MemberDraft.model_validate({"name": "Asha", "role": "President", "rank": "3"})

        assert draft.rank == 3

    def test_draft_payload(self):
        draft = MemberDraft(name="Dr. Rao", role="Director", rank=1, category=MemberCategory.ADMINISTRATION)

        payload = draft.to_payload()

        assert payload == {
            "name": "Dr. Rao",
            "role": "Director",
            "rank": 1,
            "image_url": None,
            "category": "administration",
        }

    def test_draft_requires_name_and_role(self):
        with pytest.raises(ValidationError):
            MemberDraft(name="Asha", role="").to_payload()


# =============================================================================
# Media
# =============================================================================

class TestMediaNames:
    """Tests for extension-based media detection."""

    @pytest.mark.parametrize("name", ["clip.mp4", "CLIP.MOV", "a.webm"])
    def test_videos(self, name):
        assert is_video_name(name) is True
        assert is_image_name(name) is False

    @pytest.mark.parametrize("name", ["photo.jpg", "photo.JPEG", "p.png", "p.webp"])
    def test_images(self, name):
        assert is_image_name(name) is True
        assert is_video_name(name) is False

    def test_other_files_are_neither(self):
        assert is_image_name("notes.pdf") is False
        assert is_video_name("notes.pdf") is False


# =============================================================================
# Console State
# =============================================================================

class TestConsoleState:
    """Tests for ConsoleDrafts and ConsoleState."""

    def test_defaults(self):
        state = ConsoleState()

        assert state.active_category == ContentCategory.NOTICES
        assert state.items == []
        assert state.alert is None
        assert state.generation == 0
        assert isinstance(state.active_draft, NoticeDraft)

    def test_gallery_has_no_draft(self):
        state = ConsoleState(active_category=ContentCategory.GALLERY)

        assert state.active_draft is None

    def test_replace_returns_new_drafts(self):
        drafts = ConsoleDrafts()

        updated = drafts.replace(ContentCategory.EVENTS, EventDraft(title="Hackathon"))

        assert updated.events.title == "Hackathon"
        assert drafts.events.title == ""

    def test_reset_restores_defaults(self):
        drafts = ConsoleDrafts(members=MemberDraft(name="Asha", rank=5))

        reset = drafts.reset(ContentCategory.MEMBERS)

        assert reset.members == MemberDraft()

    def test_category_capabilities(self):
        assert ContentCategory.EVENTS.has_image is True
        assert ContentCategory.MEMBERS.has_image is True
        assert ContentCategory.NOTICES.has_image is False
        assert ContentCategory.GALLERY.is_table is False
