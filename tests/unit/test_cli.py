"""Tests for the streamgen command line entry point."""

import json
import os
from unittest.mock import patch

import pytest

from streamgen.cli import apply_overrides, build_parser, main
from streamgen.common.config.settings import Config
from streamgen.core.types import SinkType, ValueFormat


@pytest.fixture(autouse=True)
def clean_env():
    """Run each test without STREAMGEN_* variables or signal handlers."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("STREAMGEN_")}
    with patch.dict(os.environ, env, clear=True), patch("streamgen.cli.signal.signal"):
        yield


class TestParser:
    def test_source_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_schema_and_quickstart_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--schema", "a.avsc", "--quickstart", "users"])

    def test_case_insensitive_choices(self):
        args = build_parser().parse_args(["--quickstart", "users", "--format", "avro", "--sink", "STDOUT"])

        assert args.format == "AVRO"
        assert args.sink == "stdout"


class TestApplyOverrides:
    def test_quickstart_defaults(self):
        args = build_parser().parse_args(["--quickstart", "pageviews"])

        config = apply_overrides(Config(), args)

        assert config.topic == "pageviews"
        assert config.key == "viewtime"

    def test_flags_override_config(self):
        args = build_parser().parse_args([
            "--quickstart", "users",
            "--topic", "people",
            "--key", "regionid",
            "--iterations", "7",
            "--max-sessions", "3",
            "--format", "DELIMITED",
            "--sink", "stdout",
        ])

        config = apply_overrides(Config(), args)

        assert config.topic == "people"
        assert config.key == "regionid"
        assert config.iterations == 7
        assert config.max_sessions == 3
        assert config.value_format == ValueFormat.DELIMITED
        assert config.sink_type == SinkType.STDOUT

    def test_env_topic_beats_quickstart_default(self):
        with patch.dict(os.environ, {"STREAMGEN_TOPIC": "from-env"}):
            config = apply_overrides(Config(), build_parser().parse_args(["--quickstart", "users"]))

        assert config.topic == "from-env"


class TestMain:
    def test_quickstart_to_stdout(self, capsys):
        code = main([
            "--quickstart", "users",
            "--sink", "stdout",
            "--iterations", "3",
            "--max-interval", "0",
            "--seed", "1",
        ])

        lines = capsys.readouterr().out.strip().splitlines()
        assert code == 0
        assert len(lines) == 3
        for line in lines:
            key, value = line.split("\t")
            assert json.loads(value)["userid"] == key

    def test_schema_file_requires_key(self, tmp_path):
        path = tmp_path / "s.avsc"
        path.write_text(json.dumps({"type": "record", "name": "s", "fields": [{"name": "id", "type": "int"}]}))

        assert main(["--schema", str(path), "--topic", "t", "--sink", "stdout"]) == 1

    def test_unknown_key_field(self, tmp_path):
        path = tmp_path / "s.avsc"
        path.write_text(json.dumps({"type": "record", "name": "s", "fields": [{"name": "id", "type": "int"}]}))

        code = main([
            "--schema", str(path), "--topic", "t", "--key", "nope",
            "--sink", "stdout", "--iterations", "1",
        ])

        assert code == 1

    def test_delimited_nested_schema_fails(self):
        code = main(["--quickstart", "orders", "--sink", "stdout", "--format", "DELIMITED"])

        assert code == 1
