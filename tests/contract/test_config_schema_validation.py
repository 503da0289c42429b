from __future__ import annotations

from pathlib import Path

import pytest

from report_ingest.config.loader import ConfigError, load_config

"""Config schema contract (report_ingest/config/schema.json)."""


def _write(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "ingest.yml"
    p.write_text(text, encoding="utf-8")
    return p


def test_shipped_example_config_is_valid():
    example = Path(__file__).resolve().parents[2] / "config" / "ingest.yml"
    assert load_config(example).source_directory == "./data"


@pytest.mark.parametrize(
    "text",
    [
        "extensions: ['.xlsx']\n",                               # source_directory missing
        "source_directory: ''\n",                                # empty path
        "source_directory: 5\n",                                 # wrong type
        "source_directory: d\nextensions: ['xlsx']\n",           # no leading dot
        "source_directory: d\nextensions: []\n",                 # empty list
        "source_directory: d\nkeep_na_strings: ['NA', 'NA']\n",  # duplicates
        "source_directory: d\ndb:\n  host: x\n",                 # unknown key
    ],
)
def test_invalid_configs_rejected(tmp_path: Path, text: str):
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(_write(tmp_path, text))
