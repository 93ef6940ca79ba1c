"""Tests for montage plan synthesis."""

import json

import pytest

from montage_planner.config import TimingConfig
from montage_planner.core.frame_resolver import resolve_plan
from montage_planner.core.models import MontagePlan, check_plan_consistency
from montage_planner.core.plan_assembler import (
    approved_shots,
    generate_montage_plan,
    plan_for_project,
)
from montage_planner.exceptions import InvalidDurationError, NoApprovedShotsError


@pytest.fixture
def three_shots(make_shot):
    """Aerial, interior and panorama shots in order."""
    return [
        make_shot("shot-001", 0, scene="Аэриал фасад здания дрон", duration=5),
        make_shot("shot-002", 1, scene="Лобби интерьер мрамор", duration=4),
        make_shot("shot-003", 2, scene="Вид с балкона панорам", duration=6),
    ]


class TestPlanStructure:
    """Tests for the overall plan shape."""

    def test_complete_plan(self, three_shots):
        """A plan has format, title cards and one transition per clip."""
        plan = generate_montage_plan(
            three_shots, 30, project_name="ЖК Премиум",
            voiceover_file="montage/voiceover.mp3", music_file="montage/music.mp3",
        )
        assert plan.version == 1
        assert plan.format.model_dump() == {"width": 3840, "height": 2160, "fps": 30}

        intro = plan.motion_graphics.intro
        outro = plan.motion_graphics.outro
        assert (intro.title, intro.duration_sec, intro.animation) == ("ЖК Премиум", 3.0, "fade_in")
        assert (outro.title, outro.duration_sec, outro.animation) == ("ЖК Премиум", 4.0, "fade_in")

        assert len(plan.timeline) == 3
        assert len(plan.transitions) == 3
        assert check_plan_consistency(plan) == []

    def test_clip_files_follow_convention(self, three_shots):
        """Clip paths follow the normalized clip convention."""
        plan = generate_montage_plan(three_shots, 30)
        assert [e.clip_file for e in plan.timeline] == [
            "montage/normalized/shot-001.mp4",
            "montage/normalized/shot-002.mp4",
            "montage/normalized/shot-003.mp4",
        ]

    def test_audio_block(self, three_shots):
        """Audio files and levels are filled in."""
        plan = generate_montage_plan(
            three_shots, 10, voiceover_file="montage/voiceover.mp3", music_file="montage/music.mp3",
        )
        assert plan.audio.voiceover.file == "montage/voiceover.mp3"
        assert plan.audio.voiceover.gain_db == 0
        assert plan.audio.music.file == "montage/music.mp3"
        assert plan.audio.music.gain_db == -18
        assert plan.audio.music.ducking_db == -10
        assert plan.audio.music.ducked_gain_db == -28
        assert plan.audio.music.duck_fade_ms == 500

    def test_missing_audio_files_are_empty_strings(self, three_shots):
        """Absent audio files become empty strings."""
        plan = generate_montage_plan(three_shots, 10)
        assert plan.audio.voiceover.file == ""
        assert plan.audio.music.file == ""

    def test_style_block(self, three_shots):
        """The default preset's tokens are copied in."""
        plan = generate_montage_plan(three_shots, 10)
        assert plan.style == {
            "preset": "premium",
            "fontFamily": "Montserrat",
            "primaryColor": "#1a1a2e",
            "secondaryColor": "#e2b44d",
            "textColor": "#ffffff",
        }

    def test_alternate_style(self, three_shots):
        """Another preset can be chosen."""
        assert generate_montage_plan(three_shots, 10, style="minimal").style["preset"] == "minimal"

    def test_document_uses_camel_case(self, three_shots):
        """The plan document uses camelCase keys."""
        document = generate_montage_plan(three_shots, 30).to_document()
        json.dumps(document)
        assert set(document) == {
            "version", "format", "timeline", "transitions", "motionGraphics", "audio", "style",
        }
        assert {"shotId", "clipFile", "startSec", "durationSec"} <= set(document["timeline"][0])
        assert document["transitions"][0]["fromShotId"] == "intro"
        assert document["transitions"][0]["type"] == "fade"
        assert "lowerThirds" in document["motionGraphics"]
        assert "duckFadeMs" in document["audio"]["music"]

    def test_document_round_trip(self, three_shots):
        """A saved plan loads back unchanged."""
        plan = generate_montage_plan(three_shots, 30)
        document = plan.to_document()
        assert MontagePlan.from_document(document).to_document() == document


class TestShotSelection:
    """Tests for approved-shot selection."""

    def test_only_approved_sorted_by_order(self, make_shot):
        """Only approved shots are used, ordered by `order`."""
        shots = [
            make_shot("shot-003", 2, scene="Interior", duration=3),
            make_shot("shot-001", 0, scene="Exterior", duration=5),
            make_shot("shot-002", 1, scene="Draft shot", duration=4, status="draft"),
            make_shot("shot-004", 3, scene="Review", duration=3, status="vid_review"),
        ]
        plan = generate_montage_plan(shots, 20)
        assert [e.shot_id for e in plan.timeline] == ["shot-001", "shot-003"]
        assert [t.to_shot_id for t in plan.transitions] == ["shot-001", "shot-003"]

    def test_accepts_plain_dicts(self):
        """Raw store dicts are accepted."""
        shots = [
            {"id": "b", "order": 1, "scene": "Kitchen", "duration": 4, "status": "approved",
             "videoFile": "shots/b.mp4"},
            {"id": "a", "order": 0, "scene": "Facade", "duration": 4, "status": "approved"},
        ]
        assert [s.id for s in approved_shots(shots)] == ["a", "b"]

    def test_no_approved_shots(self, make_shot):
        """No approved shots is an error."""
        with pytest.raises(NoApprovedShotsError, match="approved"):
            generate_montage_plan([make_shot("s1", 0, status="draft")], 10)

    def test_empty_input(self):
        """An empty shot list is an error."""
        with pytest.raises(NoApprovedShotsError):
            generate_montage_plan([], 10)

    def test_unapproved_bad_duration_is_ignored(self, make_shot):
        """Unapproved shots are not validated."""
        shots = [make_shot("ok", 0, duration=5), make_shot("bad", 1, duration=0, status="draft")]
        plan = generate_montage_plan(shots, 10)
        assert [e.shot_id for e in plan.timeline] == ["ok"]

    def test_invalid_voiceover_duration(self, three_shots):
        """A NaN narration length is rejected."""
        with pytest.raises(InvalidDurationError):
            generate_montage_plan(three_shots, float("nan"))

    @pytest.mark.parametrize("budget", [None, "30"])
    def test_non_numeric_voiceover_duration(self, three_shots, budget):
        """Non-numeric narration lengths fail as InvalidDurationError."""
        with pytest.raises(InvalidDurationError) as exc_info:
            generate_montage_plan(three_shots, budget)
        assert exc_info.value.field == "voiceoverDurationSec"


class TestTiming:
    """Tests for timeline timing."""

    def test_proportional_example(self, make_shot):
        """10s and 5s shots over 30s get 20s and 10s."""
        shots = [
            make_shot("shot-001", 0, scene="Фасад exterior", duration=10),
            make_shot("shot-002", 1, scene="Интерьер гостиная", duration=5),
        ]
        plan = generate_montage_plan(shots, 30)
        assert plan.timeline[0].duration_sec == pytest.approx(20)
        assert plan.timeline[1].duration_sec == pytest.approx(10)
        assert plan.timeline[0].start_sec == 3
        assert plan.timeline[1].start_sec == pytest.approx(23)
        last = plan.timeline[-1]
        assert last.start_sec + last.duration_sec == pytest.approx(33)
        assert plan.total_duration_sec == pytest.approx(37)

    def test_budget_conserved(self, make_shot):
        """Clip durations add up to the narration."""
        shots = [make_shot(f"s{i}", i, duration=d) for i, d in enumerate([3.2, 8.0, 1.1, 5.5, 2.0])]
        plan = generate_montage_plan(shots, 41.3)
        assert sum(e.duration_sec for e in plan.timeline) == pytest.approx(41.3, abs=0.1)

    def test_contiguous_layout(self, make_shot):
        """Clips follow each other without gaps."""
        shots = [make_shot(f"s{i}", i, duration=5) for i in range(5)]
        plan = generate_montage_plan(shots, 30)
        assert plan.timeline[0].start_sec == 3
        for prev, entry in zip(plan.timeline, plan.timeline[1:]):
            assert entry.start_sec == pytest.approx(prev.start_sec + prev.duration_sec)

    def test_dominant_shot_keeps_layout_valid(self, make_shot):
        """One huge source among short ones still yields positive, contiguous clips."""
        shots = [make_shot(f"s{i}", i, duration=d) for i, d in enumerate([1, 1000, 1, 1, 1])]
        plan = generate_montage_plan(shots, 10)

        assert all(e.duration_sec > 0 for e in plan.timeline)
        assert plan.timeline[0].start_sec == 3
        for prev, entry in zip(plan.timeline, plan.timeline[1:]):
            assert entry.start_sec == pytest.approx(prev.start_sec + prev.duration_sec)
        assert check_plan_consistency(plan) == []

        resolved = resolve_plan(plan, "/data/projects/p1")
        assert all(clip.duration_frames > 0 for clip in resolved.clips)
        assert resolved.clips[0].start_frame == 90

    def test_floor_enforced(self, make_shot):
        """Short shots get at least the minimum."""
        shots = [
            make_shot("shot-001", 0, scene="Main shot", duration=100),
            make_shot("shot-002", 1, scene="Tiny shot", duration=1),
        ]
        plan = generate_montage_plan(shots, 10)
        assert plan.timeline[1].duration_sec == pytest.approx(2)

    def test_extension_and_trim(self, make_shot):
        """Long sources are trimmed."""
        shots = [
            make_shot("long", 0, duration=10),
            make_shot("short", 1, duration=2),
        ]
        # Short shot is floored to exactly its 2s source; the long one is trimmed
        plan = generate_montage_plan(shots, 6)
        long_entry, short_entry = plan.timeline
        assert long_entry.trim_end_sec == pytest.approx(10 - long_entry.duration_sec)
        assert long_entry.motion_effect is None
        assert short_entry.trim_end_sec is None

    def test_motion_effect_when_source_too_short(self, make_shot):
        """Short sources get a Ken Burns move."""
        plan = generate_montage_plan([make_shot("s1", 0, duration=4)], 12)
        entry = plan.timeline[0]
        assert entry.motion_effect == "ken_burns"
        assert entry.trim_end_sec is None
        assert "trimEndSec" not in entry.to_document()

    def test_exact_fit_has_no_treatment(self, make_shot):
        """Exact fits are left alone."""
        entry = generate_montage_plan([make_shot("s1", 0, duration=12)], 12).timeline[0]
        assert entry.motion_effect is None
        assert entry.trim_end_sec is None

    def test_custom_timing(self, make_shot):
        """Intro and outro lengths come from the timing config."""
        timing = TimingConfig()
        timing.intro_duration = 5.0
        timing.outro_duration = 2.0
        plan = generate_montage_plan([make_shot("s1", 0)], 10, timing=timing)
        assert plan.timeline[0].start_sec == 5.0
        assert plan.motion_graphics.outro.duration_sec == 2.0

    def test_deterministic(self, three_shots):
        """Same input, same plan."""
        first = generate_montage_plan(three_shots, 27.4, project_name="X").to_document()
        second = generate_montage_plan(list(three_shots), 27.4, project_name="X").to_document()
        assert first == second


class TestRules:
    """Tests for transitions and captions in assembled plans."""

    def test_transitions_follow_rules(self, make_shot):
        """Transitions follow the scene rules."""
        shots = [
            make_shot("s1", 0, scene="Фасад exterior здания"),
            make_shot("s2", 1, scene="Лобби interior мрамор"),
            make_shot("s3", 2, scene="Деталь текстура мрамора"),
            make_shot("s4", 3, scene="Аэриал дрон над зданием"),
            make_shot("s5", 4, scene="Спальня interior"),
        ]
        plan = generate_montage_plan(shots, 40)
        summary = [(t.from_shot_id, t.type.value, t.duration_sec) for t in plan.transitions]
        assert summary == [
            ("intro", "fade", 0.5),
            ("s1", "crossfade", 0.8),
            ("s2", "cut", 0.0),
            ("s3", "fade", 0.5),
            ("s4", "crossfade", 0.8),
        ]

    def test_lower_thirds_on_area_changes(self, make_shot):
        """Captions mark area changes."""
        shots = [
            make_shot("shot-001", 0, scene="Аэриал фасад exterior дрон", duration=5),
            make_shot("shot-002", 1, scene="Лобби interior вход", duration=4),
            make_shot("shot-003", 2, scene="Лобби interior ресепшн", duration=3),
            make_shot("shot-004", 3, scene="Бассейн exterior двор", duration=4),
        ]
        plan = generate_montage_plan(shots, 30)
        ids = [lt.shot_id for lt in plan.motion_graphics.lower_thirds]
        assert ids == ["shot-001", "shot-002", "shot-004"]


class TestPlanForProject:
    """Tests for plan_for_project."""

    def test_reads_project_document(self):
        """Name, audio files and shots come from the project."""
        project = {
            "id": "p1",
            "name": "Riverside",
            "stage": "review",
            "voiceoverFile": "montage/voiceover.mp3",
            "musicFile": "montage/music.mp3",
            "shots": [
                {"id": "s1", "order": 0, "scene": "Facade", "duration": 5, "status": "approved"},
                {"id": "s2", "order": 1, "scene": "Lobby", "duration": 5, "status": "draft"},
            ],
        }
        plan = plan_for_project(project, 12)
        assert plan.motion_graphics.intro.title == "Riverside"
        assert plan.audio.voiceover.file == "montage/voiceover.mp3"
        assert [e.shot_id for e in plan.timeline] == ["s1"]
