"""
Tests for configuration loading.
"""

from pathlib import Path

import pendulum
import pytest
from pydantic import ValidationError

from slotgrid.config import AppConfig, DefaultsConfig, load_config
from slotgrid.domain.clock import FixedClock
from slotgrid.domain.slot_engine import RemainderPolicy


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Built-in defaults."""

    def test_default_values(self):
        config = AppConfig()

        assert config.timezone is None
        assert config.formats.date_format == "YYYY-MM-DD"
        assert config.formats.time_format == "HH:mm"
        assert config.defaults.period == "00:30:00"
        assert config.defaults.remainder_policy is RemainderPolicy.TRUNCATE

    def test_closes_before_opens_rejected(self):
        with pytest.raises(ValidationError, match="closes must be later than opens"):
            DefaultsConfig(opens="16:00", closes="08:00")

    @pytest.mark.parametrize("period", ["00:00:00", "thirty", "00:75:00"])
    def test_invalid_period_rejected(self, period):
        with pytest.raises(ValidationError):
            DefaultsConfig(period=period)

    def test_unknown_remainder_policy_rejected(self):
        with pytest.raises(ValidationError):
            DefaultsConfig(remainder_policy="pad")

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")


class TestLoadFromYaml:
    """Loading YAML files."""

    def test_load_full_config(self, tmp_path):
        path = _write(
            tmp_path,
            """
timezone: Europe/Helsinki
formats:
  date_format: DD.MM.YYYY
  time_format: H:mm
defaults:
  period: "00:15:00"
  remainder_policy: reject
reservations_file: reservations.yaml
""",
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Helsinki"
        assert config.formats.date_format == "DD.MM.YYYY"
        assert config.defaults.remainder_policy is RemainderPolicy.REJECT
        assert config.reservations_file == tmp_path / "reservations.yaml"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "timezone: [unclosed\n")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = _write(tmp_path, "- one\n- two\n")

        with pytest.raises(ValueError, match="mapping at the root"):
            AppConfig.load_from_yaml(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = _write(tmp_path, "")

        assert AppConfig.load_from_yaml(path) == AppConfig()

    def test_load_config_with_explicit_path(self, tmp_path):
        path = _write(tmp_path, "timezone: UTC\n")

        assert load_config(path).timezone == "UTC"


class TestBuilders:
    """Wiring domain objects from configuration."""

    def test_build_engine(self, tmp_path):
        path = _write(
            tmp_path,
            """
timezone: Europe/Helsinki
formats:
  time_format: H:mm
defaults:
  period: "00:15:00"
""",
        )
        engine = AppConfig.load_from_yaml(path).build_engine()

        slots = engine.generate_slots("2015-10-09T08:00:00+03:00", "2015-10-09T09:00:00+03:00")

        assert len(slots) == 4
        assert slots[0].as_string == "8:00–8:15"
        assert engine.default_period == pendulum.duration(minutes=15)

    def test_build_date_arithmetic(self):
        config = AppConfig(timezone="Europe/Helsinki", formats={"date_format": "DD.MM.YYYY"})

        arithmetic = config.build_date_arithmetic(clock=FixedClock("2016-10-10T06:00:00+03:00"))

        assert arithmetic.current_or_given_date_string("") == "10.10.2016"
        assert arithmetic.add_days("10.10.2016", 1) == "11.10.2016"
