"""Tests for PlaybackSession state and player settings."""

from __future__ import annotations

import pytest

from streamhub.domain.entities.media import SubtitleCue
from streamhub.domain.entities.session import (
    MAX_RETRIES,
    PlaybackSession,
    PlayerSettings,
    SessionState,
    SubtitleAppearance,
)


class TestPlayerSettings:
    def test_defaults(self) -> None:
        settings = PlayerSettings()
        assert settings.playback_speed == 1.0
        assert settings.quality == "Auto"
        assert settings.theme == "dark"
        assert settings.subtitles.delay_seconds == 0.0

    @pytest.mark.parametrize("speed", [0.5, 0.75, 1.0, 1.25, 1.5, 2.0])
    def test_allowed_speeds(self, speed: float) -> None:
        assert PlayerSettings(playback_speed=speed).playback_speed == speed

    def test_rejects_unknown_speed(self) -> None:
        with pytest.raises(ValueError, match="playback_speed"):
            PlayerSettings(playback_speed=3.0)

    def test_rejects_unknown_quality(self) -> None:
        with pytest.raises(ValueError, match="quality"):
            PlayerSettings(quality="4K")

    def test_rejects_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="theme"):
            PlayerSettings(theme="neon")

    def test_rejects_opacity_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="background_opacity"):
            SubtitleAppearance(background_opacity=1.5)

    def test_rejects_non_positive_font(self) -> None:
        with pytest.raises(ValueError, match="font_size"):
            SubtitleAppearance(font_size=0)


class TestPlaybackSession:
    def test_starts_idle(self) -> None:
        session = PlaybackSession()
        assert session.state == SessionState.IDLE
        assert session.retry_count == 0
        assert session.max_retries == MAX_RETRIES

    def test_can_retry_only_in_error(self) -> None:
        session = PlaybackSession()
        assert session.can_retry is False
        session.state = SessionState.ERROR
        assert session.can_retry is True

    def test_retries_exhausted(self) -> None:
        session = PlaybackSession(state=SessionState.ERROR, retry_count=3)
        assert session.retries_exhausted is True
        assert session.can_retry is False

    def test_cues_at_half_open_window(self) -> None:
        session = PlaybackSession(
            active_cues=[
                SubtitleCue(1.0, 2.0, "first"),
                SubtitleCue(1.5, 3.0, "overlap"),
            ]
        )
        assert [c.text for c in session.cues_at(1.0)] == ["first"]
        assert [c.text for c in session.cues_at(1.75)] == ["first", "overlap"]
        assert [c.text for c in session.cues_at(2.0)] == ["overlap"]
        assert session.cues_at(3.0) == []

    def test_cues_at_applies_delay(self) -> None:
        session = PlaybackSession(
            active_cues=[SubtitleCue(1.0, 2.0, "late")],
            settings=PlayerSettings(subtitles=SubtitleAppearance(delay_seconds=0.5)),
        )
        assert session.cues_at(1.25) == []
        assert [c.text for c in session.cues_at(1.5)] == ["late"]
