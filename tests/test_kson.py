"""
Tests for document assembly and the full KSH to KSON conversion.
"""
import dataclasses
import logging

import pytest

from ksh2kson import (
    ConversionError,
    DecodeError,
    InvalidValueError,
    KSONDocument,
    ParseError,
    TimingError,
    ksh2kson,
)
from ksh2kson.classes import (
    ButtonLane,
    CameraParam,
    DifficultySlot,
    GraphPoint,
    LaserLane,
    LaserPoint,
    LaserSegment,
    NoteEvent,
)

EMPTY_MEASURE = "0000|00|--\n0000|00|--\n0000|00|--\n0000|00|--\n--\n"


def convert(header: str = "", body: str = EMPTY_MEASURE) -> KSONDocument:
    return ksh2kson(f"{header}\n--\n{body}")


class TestExampleCharts:
    def test_empty_chart(self):
        data = ksh2kson("t=150\nbeat=4/4\n--\n" + EMPTY_MEASURE).to_dict()
        assert data["beat"]["bpm"] == [{"y": 0, "v": 150.0}]
        assert data["beat"]["time_sig"] == [{"idx": 0, "v": {"n": 4, "d": 4}}]
        assert data["beat"]["resolution"] == 48
        assert "stop" not in data["beat"]
        assert data["note"] == {"bt": [[], [], [], []], "fx": [[], []], "laser": [[], []]}
        assert data["camera"] == {}
        assert "gauge" not in data

    def test_small_chart(self):
        text = """title=Example
artist=Composer
effect=Charter
jacket=jacket.png
illustrator=Painter
difficulty=extended
level=16
t=180
m=song.ogg
mvol=80
o=-25
po=30000
plength=15000
ver=167
--
beat=4/4
t=180
1000|02|0-
0000|00|:-
0200|10|o-
0000|00|--
--
0020|10|-o
0020|00|-:
0001|00|-0
0000|00|--
--
#define_fx MyFX type=Retrigger
"""
        data = ksh2kson(text).to_dict()
        assert data["version"] == "ksh 167"
        assert data["meta"] == {
            "title": "Example",
            "artist": "Composer",
            "chart_author": "Charter",
            "level": 16,
            "difficulty": {"idx": 2, "name": "extended"},
            "disp_bpm": "180",
            "jacket_filename": "jacket.png",
            "jacket_author": "Painter",
        }
        assert data["beat"]["bpm"] == [{"y": 0, "v": 180.0}]
        assert data["audio"] == {
            "bgm": {"filename": "song.ogg", "vol": 80, "offset": -25, "preview": {"offset": 30000, "duration": 15000}}
        }
        assert data["note"]["bt"] == [[{"y": 0}], [{"y": 96, "l": 48}], [{"y": 192, "l": 96}], [{"y": 288}]]
        assert data["note"]["fx"] == [[{"y": 96, "l": 48}, {"y": 192, "l": 48}], [{"y": 0}]]
        assert data["note"]["laser"] == [
            [{"y": 0, "v": [{"y": 0, "v": 0.0}, {"ry": 96, "v": 1.0}]}],
            [{"y": 192, "v": [{"y": 192, "v": 1.0}, {"ry": 96, "v": 0.0}]}],
        ]

    def test_lane_accessors(self):
        note = ksh2kson("--\n1000|01|0o\n0000|00|--\n--\n").note
        assert note.lane(ButtonLane.BT_A) == (NoteEvent(0),)
        assert note.lane(ButtonLane.FX_R) == (NoteEvent(0, 96),)
        assert note.laser_lane(LaserLane.LEFT) == (LaserSegment(0, (LaserPoint(0, 0.0, relative=False),)),)
        assert note.laser_lane(LaserLane.RIGHT) == (LaserSegment(0, (LaserPoint(0, 1.0, relative=False),)),)

    def test_all_ticks_in_range(self):
        body = "2100|12|0o\n" * 8 + "--\n" + "beat=3/4\n0012|21|:0\n" + "1200|10|o:\n" * 5 + "--\n"
        document = ksh2kson("--\n" + body)
        total = 192 + 144
        ys = [note.y for lane in document.note.bt + document.note.fx for note in lane]
        ys += [segment.y for lane in document.note.laser for segment in lane]
        assert ys
        assert all(0 <= y < total for y in ys)


class TestMeta:
    @pytest.mark.parametrize("value, level", [("0", 1), ("99", 20), ("12", 12), ("-5", 1), ("abc", 1)])
    def test_level(self, value, level):
        assert convert(f"level={value}").meta.level == level

    def test_level_missing(self):
        assert convert().meta.level == 1

    def test_unparseable_level_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            convert("level=high")
        assert "using level 1" in caplog.text

    @pytest.mark.parametrize(
        "value, slot",
        [
            ("light", DifficultySlot.LIGHT),
            ("Challenge", DifficultySlot.CHALLENGE),
            ("EXTENDED", DifficultySlot.EXTENDED),
            ("infinite", DifficultySlot.INFINITE),
            ("something", DifficultySlot.INFINITE),
        ],
    )
    def test_difficulty(self, value, slot):
        meta = convert(f"difficulty={value}").meta
        assert meta.difficulty == slot
        assert meta.to_dict()["difficulty"] == {"idx": slot.value, "name": value}

    def test_difficulty_missing(self):
        assert convert().meta.to_dict()["difficulty"] == {"idx": 3}

    def test_standard_bpm(self):
        assert convert("to=175.5").meta.std_bpm == 175.5

    @pytest.mark.parametrize("value", ["fast", "inf"])
    def test_invalid_standard_bpm(self, value):
        with pytest.raises(ValueError):
            convert(f"to={value}")

    def test_information(self):
        assert convert("information=hello").meta.to_dict()["information"] == "hello"

    def test_defaults(self):
        assert convert().meta.to_dict() == {
            "title": "",
            "artist": "",
            "chart_author": "",
            "level": 1,
            "difficulty": {"idx": 3},
        }

    @pytest.mark.parametrize("header, version", [("ver=171", "ksh 171"), ("ver= ", "ksh"), ("", "ksh")])
    def test_version(self, header, version):
        assert convert(header).version == version


class TestAudioAndGauge:
    def test_bgm_filename(self, caplog):
        with caplog.at_level(logging.WARNING):
            bgm = convert("m=main.ogg;main_f.ogg;main_p.ogg").audio.bgm
        assert bgm.filename == "main.ogg"
        assert "multiple song files" in caplog.text

    def test_default_values_are_omitted(self):
        data = convert("m=a.ogg\nmvol=100\no=0").audio.to_dict()
        assert data == {"bgm": {"filename": "a.ogg"}}

    def test_negative_preview_is_omitted(self):
        bgm = convert("po=-1\nplength=-1").audio.bgm
        assert bgm.preview_offset is None
        assert bgm.preview_duration is None

    def test_zero_preview_offset(self):
        assert convert("po=0").audio.to_dict()["bgm"]["preview"] == {"offset": 0}

    def test_invalid_volume(self):
        with pytest.raises(InvalidValueError):
            convert("mvol=loud")

    @pytest.mark.parametrize("value, total", [("50", 100), ("100", 100), ("250", 250)])
    def test_gauge_total(self, value, total):
        document = convert(f"total={value}")
        assert document.gauge is not None
        assert document.to_dict()["gauge"] == {"total": total}

    def test_invalid_gauge_total(self):
        with pytest.raises(ValueError):
            convert("total=lots")


class TestCamera:
    def test_zoom(self):
        body = "zoom_top=100\n0000|00|--\nzoom_bottom=-50\n0000|00|--\nzoom_side=20\n0000|00|--\n--\n"
        camera = convert(body=body).camera
        assert camera.graph(CameraParam.ROTATION_X) == (GraphPoint(0, 100.0),)
        assert camera.graph(CameraParam.ZOOM) == (GraphPoint(64, -50.0),)
        assert camera.to_dict() == {
            "cam": {
                "body": {
                    "zoom": [{"y": 64, "v": -50.0}],
                    "rotation_x": [{"y": 0, "v": 100.0}],
                    "shift_x": [{"y": 128, "v": 20.0}],
                }
            }
        }

    def test_same_tick_values(self):
        body = "center_split=0\ncenter_split=30\n0000|00|--\n--\n"
        points = convert(body=body).camera.graph(CameraParam.CENTER_SPLIT)
        assert points == (GraphPoint(0, 0.0, 30.0),)
        assert points[0].to_dict() == {"y": 0, "v": 0.0, "vf": 30.0}

    def test_invalid_camera_value(self):
        with pytest.raises(InvalidValueError):
            convert(body="zoom_top=wide\n0000|00|--\n--\n")


class TestErrors:
    @pytest.mark.parametrize(
        "body, error",
        [
            ("0000|00|--\nnot a line\n--\n", ParseError),
            ("0000|00|--\n0000|00|--\n0000|00|--\n0000|00|--\n0000|00|--\n--\n", TimingError),
            ("t=0\n0000|00|--\n--\n", InvalidValueError),
            ("0000|00|x-\n--\n", DecodeError),
        ],
    )
    def test_error_kinds(self, body, error):
        with pytest.raises(error) as excinfo:
            ksh2kson("--\n" + body)
        assert isinstance(excinfo.value, ConversionError)

    def test_lenient_conversion(self):
        document = ksh2kson("--\n1000|00|--\nnot a line\n--\n", strict=False)
        assert document.note.bt[0][0].y == 0

    def test_document_is_immutable(self):
        document = convert()
        with pytest.raises(dataclasses.FrozenInstanceError):
            document.version = "kson"  # type: ignore[misc]
