"""Tests for generate.py, the offline fetch-and-verify tool."""

from pathlib import Path

import pytest

import generate
from idna_mapping import builder


def _fake_urlretrieve(url: str, filename: str):
    name = Path(filename).name
    Path(filename).write_text("\n".join(builder.read_data(name)) + "\n", encoding="utf-8")
    return filename, None


def test_check_rebuilds_bundled_tables(capsys: pytest.CaptureFixture[str]) -> None:
    generate.main(["--check"])
    out = capsys.readouterr().out
    mapping, joining = builder.build()
    assert f"fingerprint {mapping.fingerprint()}" in out
    assert f"fingerprint {joining.fingerprint()}" in out
    assert "DISALLOWED" in out
    assert "DUAL_JOINING" in out


def test_fetch_installs_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    urls = []

    def fake(url: str, filename: str):
        urls.append(url)
        return _fake_urlretrieve(url, filename)

    monkeypatch.setattr(generate.urllib.request, "urlretrieve", fake)
    cache = tmp_path / "cache"
    out_dir = tmp_path / "out"
    generate.main(["--cache-dir", str(cache), "--output-dir", str(out_dir)])

    assert sorted(urls) == [
        "https://www.unicode.org/Public/15.1.0/ucd/extracted/DerivedJoiningType.txt",
        "https://www.unicode.org/Public/idna/15.1.0/IdnaMappingTable.txt",
    ]
    for name in generate.SOURCES:
        assert (out_dir / name).read_text(encoding="utf-8").splitlines() == builder.read_data(name)
    assert "Done." in capsys.readouterr().out


def test_cached_files_are_not_refetched(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in generate.SOURCES:
        _fake_urlretrieve("", str(tmp_path / name))

    def no_network(url: str, filename: str):
        raise AssertionError(f"unexpected download of {url}")

    monkeypatch.setattr(generate.urllib.request, "urlretrieve", no_network)
    generate.main(["--cache-dir", str(tmp_path), "--output-dir", str(tmp_path / "out")])


def test_version_mismatch_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(generate.urllib.request, "urlretrieve", _fake_urlretrieve)
    with pytest.raises(SystemExit) as exc:
        generate.main(
            ["--unicode-version", "16.0.0", "--cache-dir", str(tmp_path), "--output-dir", str(tmp_path)]
        )
    assert exc.value.code == 1


def test_download_failure_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def offline(url: str, filename: str):
        raise OSError("Could not resolve host")

    monkeypatch.setattr(generate.urllib.request, "urlretrieve", offline)
    with pytest.raises(SystemExit) as exc:
        generate.main(["--cache-dir", str(tmp_path)])
    assert exc.value.code == 1
