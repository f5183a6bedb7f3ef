import pytest

from mediaprobe.common.probe import rules
from mediaprobe.domain.entities.media_info import BITRATE_UNKNOWN
from mediaprobe.domain.entities.time_offset import TimeOffset
from mediaprobe.domain.enums.audio_layout import AudioLayout
from mediaprobe.domain.enums.media_kind import MediaKind

from probe_samples import (
    MALFORMED_VIDEO_OUTPUT,
    MKV_OUTPUT,
    MP3_OUTPUT,
    MP4_OUTPUT,
    NO_STREAMS_OUTPUT,
    PNG_OUTPUT,
    AAC_AUDIO_LINE,
    H264_VIDEO_LINE,
)


# ---- type ----------------------------------------------------------------------
def test_type_video_unless_image_probe_agrees():
    assert rules.extract_type(H264_VIDEO_LINE, lambda: False) is MediaKind.video
    assert rules.extract_type(H264_VIDEO_LINE, lambda: True) is MediaKind.image


def test_type_audio_and_unknown():
    assert rules.extract_type(MP3_OUTPUT, lambda: True) is MediaKind.audio
    assert rules.extract_type(NO_STREAMS_OUTPUT, lambda: True) is MediaKind.unknown


def test_type_image_check_only_runs_for_video_lines():
    calls = []
    rules.extract_type(MP3_OUTPUT, lambda: calls.append(1) or True)
    assert calls == []


# ---- scalars ---------------------------------------------------------------------
def test_duration_timecode():
    d = rules.extract_duration("  Duration: 00:01:23.450, start: 0.000000, bitrate: 128 kb/s")
    assert d.seconds == 83.45


def test_duration_absent_and_na():
    assert rules.extract_duration(NO_STREAMS_OUTPUT) is None
    assert rules.extract_duration(PNG_OUTPUT) is None


def test_bitrate_variants():
    assert rules.extract_bitrate("Duration: 00:00:01.00, bitrate: N/A") == BITRATE_UNKNOWN == -1
    assert rules.extract_bitrate("Duration: 00:00:01.00, bitrate: n/a") == -1
    assert rules.extract_bitrate("Duration: 00:00:01.00, start: 0.0, bitrate: 128, x") == 128
    assert rules.extract_bitrate(MP3_OUTPUT) == 128
    assert rules.extract_bitrate(NO_STREAMS_OUTPUT) is None


def test_bitrate_unparseable_is_absent_not_sentinel():
    assert rules.extract_bitrate("bitrate: unknown") is None


def test_start_seconds():
    assert rules.extract_start(MP3_OUTPUT) == TimeOffset(0.025057)
    assert rules.extract_start("start: -0.021000, bitrate: 1 kb/s").seconds == pytest.approx(-0.021)
    assert rules.extract_start(PNG_OUTPUT) is None


# ---- video -----------------------------------------------------------------------
def test_video_descriptor_full_line():
    v = rules.extract_video(H264_VIDEO_LINE)
    assert (v.width, v.height) == (1920, 1080)
    assert v.codec == "h264 (High)"
    assert v.pixel_format == "yuv420p"
    assert v.pixel_aspect_ratio == "1:1"
    assert v.display_aspect_ratio == "16:9"
    assert v.time_bases == {"fps": 30, "tbr": 30, "tbn": 1000, "tbc": 60}
    assert v.frame_rate == 30
    # no Duration announcement in a bare line
    assert v.frame_count is None
    assert v.metadata == {}


def test_video_frame_count_from_file_duration():
    v = rules.extract_video(MP4_OUTPUT)
    assert v.frame_rate == 30.0
    assert v.frame_count == 300


def test_video_frame_count_recomputed_for_other_duration():
    assert rules.extract_video(H264_VIDEO_LINE, duration=TimeOffset(10.0)).frame_count == 300
    assert rules.extract_video(H264_VIDEO_LINE, duration=TimeOffset(2.01)).frame_count == 61


def test_video_metadata_block_until_next_stream():
    v = rules.extract_video(MP4_OUTPUT)
    assert v.metadata == {"handler_name": "VideoHandler", "vendor_id": "[0][0][0][0]"}


def test_video_nested_commas_and_tbr_fallback():
    v = rules.extract_video(MKV_OUTPUT)
    assert v.codec == "hevc (Main 10)"
    assert v.pixel_format == "yuv420p10le(tv, bt2020nc/bt2020/smpte2084)"
    assert (v.width, v.height) == (3840, 2160)
    assert v.frame_rate == pytest.approx(23.98)
    assert v.frame_count == 89290
    # the audio stream's block is not the video's
    assert v.metadata == {}


def test_video_image_like_stream_uses_tbr():
    v = rules.extract_video(PNG_OUTPUT)
    assert v.codec == "png"
    assert v.pixel_format == "rgb24(pc)"
    assert v.frame_rate == 25.0
    assert v.frame_count is None


def test_video_malformed_descriptor_leaves_fields_unset():
    v = rules.extract_video(MALFORMED_VIDEO_OUTPUT)
    assert (v.width, v.height) == (1280, 720)
    assert v.codec is None
    assert v.pixel_format is None
    assert v.time_bases == {}
    assert v.frame_rate is None


def test_video_absent():
    assert rules.extract_video(MP3_OUTPUT) is None


# ---- audio -----------------------------------------------------------------------
def test_audio_descriptor_codec_is_first_leftover():
    a = rules.extract_audio(AAC_AUDIO_LINE)
    assert a.layout is AudioLayout.stereo
    assert a.channel_count == 2
    assert a.sample_rate_hz == 44100
    assert a.bitrate_kbps == 128
    assert a.codec == "aac"


def test_audio_stream_metadata_in_video_file():
    a = rules.extract_audio(MP4_OUTPUT)
    assert a.metadata == {"handler_name": "SoundHandler"}


def test_audio_header_metadata_for_pure_audio():
    a = rules.extract_audio(MP3_OUTPUT)
    assert a.codec == "mp3"
    assert a.metadata == {
        "title": "Night Drive",
        "artist": "The Examples",
        "album": "Fixtures",
        "track": "3",
    }


def test_audio_surround():
    a = rules.extract_audio(MKV_OUTPUT)
    assert a.layout is AudioLayout.surround_5_1
    assert a.channel_count == 6
    assert a.sample_rate_hz == 48000
    assert a.bitrate_kbps == 640
    assert a.codec == "ac3"
    assert a.metadata == {"title": "Surround Mix", "language_note": "original"}


def test_audio_without_layout_keeps_channel_count_unset():
    a = rules.extract_audio("Stream #0:0: Audio: opus, 48000 Hz, 7.1, fltp")
    assert a.layout is None
    assert a.channel_count is None
    assert a.codec == "opus"


def test_audio_absent():
    assert rules.extract_audio(PNG_OUTPUT) is None


# ---- existence probes --------------------------------------------------------------
def test_has_video_and_audio():
    assert rules.has_video(MP4_OUTPUT) and rules.has_audio(MP4_OUTPUT)
    assert not rules.has_video(MP3_OUTPUT) and rules.has_audio(MP3_OUTPUT)
    assert rules.has_video(MALFORMED_VIDEO_OUTPUT)
    assert not rules.has_video(NO_STREAMS_OUTPUT) and not rules.has_audio(NO_STREAMS_OUTPUT)
