from mediaprobe.common.probe import rules
from mediaprobe.domain.entities.media_info import MediaInfo
from mediaprobe.domain.enums.media_kind import MediaKind
from mediaprobe.services.mappers.media_info import to_media_info_read

from probe_samples import MKV_OUTPUT


def _info(text: str) -> MediaInfo:
    return MediaInfo(
        kind=rules.extract_type(text, lambda: False),
        duration=rules.extract_duration(text),
        bitrate=rules.extract_bitrate(text),
        start=rules.extract_start(text),
        video=rules.extract_video(text),
        audio=rules.extract_audio(text),
    )


def test_to_media_info_read_round_trips_to_json():
    read = to_media_info_read(_info(MKV_OUTPUT), path="/media/movie.mkv")
    assert read.kind is MediaKind.video
    assert read.duration_sec == 3723.5
    assert read.duration_timecode == "01:02:03.500"
    assert read.bitrate == -1
    assert read.video.width == 3840
    assert read.audio.channel_count == 6

    payload = read.model_dump(mode="json")
    assert payload["audio"]["layout"] == "5.1"
    assert payload["path"] == "/media/movie.mkv"


def test_to_media_info_read_empty():
    read = to_media_info_read(MediaInfo())
    assert read.kind is MediaKind.unknown
    assert read.video is None and read.audio is None and read.duration_sec is None
