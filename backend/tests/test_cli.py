"""
Tests for the command line entry point
"""

import json
import logging

import pytest

from safemeds.cli import EXIT_INVALID_INPUT, EXIT_NO_VERDICT, EXIT_OK, main

from conftest import UNREADABLE_IDENTITY, ScriptedModel, make_service


@pytest.fixture(autouse=True)
def reset_package_logger():
    package_logger = logging.getLogger("safemeds")
    saved = (list(package_logger.handlers), package_logger.propagate, package_logger.level)
    yield
    handlers, propagate, level = saved
    package_logger.handlers = handlers
    package_logger.propagate = propagate
    package_logger.setLevel(level)


def test_text_with_inline_profile(capsys, aspirin_model, aspirin_labels):
    service = make_service(aspirin_model, aspirin_labels)

    code = main(
        ["--text", "aspirin", "--age", "45", "--sex", "Male", "--condition", "High BP"],
        service=service,
    )

    assert code == EXIT_OK
    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "CAUTION"
    assert output["contraindicationsDetected"] == ["High BP"]


def test_profile_file(capsys, tmp_path, aspirin_model, aspirin_labels):
    profile_path = tmp_path / "profile.json"
    profile_path.write_text(json.dumps({
        "age": 72,
        "gender": "Female",
        "conditions": ["Kidney Disease"],
        "currentMeds": ["Warfarin"],
    }))

    code = main(
        ["--text", "aspirin", "--profile", str(profile_path)],
        service=make_service(aspirin_model, aspirin_labels),
    )

    assert code == EXIT_OK
    prompt = aspirin_model.prompt_for("SafetyVerdict")
    assert "- Age: 72" in prompt
    assert "- Current Meds: Warfarin" in prompt


def test_missing_age_is_invalid_input(capsys, aspirin_model):
    code = main(["--text", "aspirin"], service=make_service(aspirin_model))

    assert code == EXIT_INVALID_INPUT
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "age" in captured.err
    assert aspirin_model.calls == []


def test_unreadable_profile_file(capsys, tmp_path, aspirin_model):
    profile_path = tmp_path / "profile.json"
    profile_path.write_text("{not json")

    code = main(
        ["--text", "aspirin", "--profile", str(profile_path)],
        service=make_service(aspirin_model),
    )

    assert code == EXIT_INVALID_INPUT


def test_profile_file_with_non_string_allergy(capsys, tmp_path, aspirin_model):
    profile_path = tmp_path / "profile.json"
    profile_path.write_text(json.dumps({"age": 30, "allergies": [42]}))

    code = main(
        ["--text", "aspirin", "--profile", str(profile_path)],
        service=make_service(aspirin_model),
    )

    assert code == EXIT_INVALID_INPUT
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "allergies" in captured.err
    assert aspirin_model.calls == []


def test_unidentified_photo_exit_code(capsys, png_bytes, tmp_path, aspirin_labels):
    photo = tmp_path / "blurry.png"
    photo.write_bytes(png_bytes)
    model = ScriptedModel(identity=dict(UNREADABLE_IDENTITY))

    code = main(["--image", str(photo), "--age", "30"], service=make_service(model, aspirin_labels))

    assert code == EXIT_NO_VERDICT
    assert json.loads(capsys.readouterr().out)["headline"] == "Could Not Identify"


def test_text_and_image_are_exclusive(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--text", "aspirin", "--image", "box.jpg", "--age", "30"])
    assert exc_info.value.code == 2
