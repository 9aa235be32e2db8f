# tests/test_logger.py

import json
import logging

from genbot.api.schemas import GenerationParameters
from genbot.utils.logger import RequestContextFilter, _load_config, get_logger, summarize_for_logging


def test_context_filter_defaults_request_id():
    record = logging.LogRecord("genbot", logging.INFO, __file__, 1, "msg", None, None)
    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "N/A"


def test_context_filter_keeps_request_id():
    record = logging.LogRecord("genbot", logging.INFO, __file__, 1, "msg", None, None)
    record.request_id = "req-1"
    RequestContextFilter().filter(record)
    assert record.request_id == "req-1"


def test_get_logger_cached():
    assert get_logger("genbot.test") is get_logger("genbot.test")


def test_load_config_missing_file(tmp_path):
    assert _load_config(tmp_path / "nope.yaml") is None


def test_load_config_not_a_mapping(tmp_path):
    path = tmp_path / "logging.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert _load_config(path) is None


def test_load_config_creates_log_directory(tmp_path):
    log_file = tmp_path / "logs" / "genbot.log"
    path = tmp_path / "logging.yaml"
    path.write_text(
        "version: 1\n"
        "handlers:\n"
        "  file_handler:\n"
        "    class: logging.FileHandler\n"
        f"    filename: {log_file}\n",
        encoding="utf-8",
    )
    config = _load_config(path)

    assert config["handlers"]["file_handler"]["filename"] == str(log_file)
    assert log_file.parent.is_dir()


def test_summarize_truncates_bytes_and_strings():
    summary = json.loads(summarize_for_logging({"image": b"x" * 5000, "prompt": "p" * 300}, max_len=10))
    assert summary["image"] == "<bytes len=5000>"
    assert summary["prompt"] == "p" * 10 + "..."


def test_summarize_pydantic_model():
    params = GenerationParameters(height=320, width=320, quality="standard", cfg_scale=8.0, seed=7)
    summary = json.loads(summarize_for_logging(params, fields_to_show=["seed", "quality"]))
    assert summary == {"seed": 7, "quality": "standard"}
