"""Tests for the encoder registry."""

from audio_waveform.render import registry


def test_builtin_encoders_registered():
    kinds = {info["kind"]: info for info in registry.list_all()}
    assert set(kinds) == {"json", "svg", "png"}
    assert kinds["json"]["content_type"] == "application/json"
    assert kinds["svg"]["content_type"] == "image/svg+xml"
    assert kinds["png"]["content_type"] == "image/png"
    assert kinds["png"]["extension"] == ".png"


def test_json_default_sample_count():
    assert registry.get("json")["defaults"]["samples"] == 100
    assert registry.get("svg")["defaults"]["samples"] == 1800


def test_unknown_kind_is_none():
    assert registry.get("gif") is None


def test_list_all_returns_copies():
    registry.list_all()[0]["defaults"]["samples"] = -1
    assert all(info["defaults"]["samples"] > 0 for info in registry.list_all())


def test_image_encoders_validate_their_defaults():
    for kind in ("svg", "png"):
        info = registry.get(kind)
        assert info["validate"](info["defaults"]) == []


def test_json_accepts_any_extra_keys():
    assert registry.get("json")["validate"]({"color": "notacolor", "width": -1}) == []
