from __future__ import annotations

from pathlib import Path

import pytest

from wasm_bundle.build.assets import merge_assets
from wasm_bundle.build.compile import CompileOutput
from wasm_bundle.errors import AssetError
from wasm_bundle.schemas.config import AssetConfig, BuildConfig


def _compiled(out_dir: Path, crate_dir: Path) -> CompileOutput:
    artifacts = tuple(sorted(path.name for path in out_dir.iterdir())) if out_dir.exists() else ()
    return CompileOutput(crate_dir=crate_dir, out_dir=out_dir, artifacts=artifacts, config=BuildConfig())


def test_overwrite_by_name(tmp_path: Path) -> None:
    html = tmp_path / "html"
    html.mkdir()
    (html / "a.html").write_text("asset a", encoding="utf-8")
    (html / "b.js").write_text("asset b", encoding="utf-8")
    pkg = tmp_path / "pkg"
    pkg.mkdir()
    (pkg / "a.html").write_text("compiler a", encoding="utf-8")

    result = merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert (pkg / "a.html").read_text(encoding="utf-8") == "asset a"
    assert (pkg / "b.js").read_text(encoding="utf-8") == "asset b"
    assert result.copied == ("a.html", "b.js")
    assert result.overwritten == ("a.html",)


def test_empty_source_copies_nothing(tmp_path: Path) -> None:
    (tmp_path / "html").mkdir()
    pkg = tmp_path / "pkg"
    pkg.mkdir()
    (pkg / "donut_bg.wasm").write_text("wasm", encoding="utf-8")

    result = merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert result.copied == ()
    assert sorted(path.name for path in pkg.iterdir()) == ["donut_bg.wasm"]


def test_pattern_is_not_recursive(tmp_path: Path) -> None:
    html = tmp_path / "html"
    (html / "nested").mkdir(parents=True)
    (html / "nested" / "deep.html").write_text("deep", encoding="utf-8")
    (html / "index.html").write_text("top", encoding="utf-8")
    (html / "LICENSE").write_text("no extension", encoding="utf-8")
    pkg = tmp_path / "pkg"
    pkg.mkdir()

    result = merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert result.copied == ("index.html",)
    assert not (pkg / "nested").exists()
    assert not (pkg / "deep.html").exists()


def test_missing_destination_not_created(tmp_path: Path) -> None:
    (tmp_path / "html").mkdir()
    (tmp_path / "html" / "index.html").write_text("x", encoding="utf-8")
    pkg = tmp_path / "pkg"

    with pytest.raises(AssetError, match="refusing to create"):
        merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert not pkg.exists()


def test_missing_source_reports_compile_success(tmp_path: Path) -> None:
    pkg = tmp_path / "pkg"
    pkg.mkdir()

    with pytest.raises(AssetError, match="compile step succeeded") as excinfo:
        merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert excinfo.value.stage == "assets"


def test_source_must_be_directory(tmp_path: Path) -> None:
    (tmp_path / "html").write_text("not a dir", encoding="utf-8")
    pkg = tmp_path / "pkg"
    pkg.mkdir()

    with pytest.raises(AssetError, match="not a directory"):
        merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)


def test_requires_compile_output(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        merge_assets(tmp_path / "pkg", AssetConfig(), workspace=tmp_path)  # type: ignore[arg-type]


def test_hidden_files_skipped(tmp_path: Path) -> None:
    html = tmp_path / "html"
    html.mkdir()
    (html / "index.html").write_text("top", encoding="utf-8")
    (html / ".DS_Store").write_text("finder", encoding="utf-8")
    (html / ".env.local").write_text("SECRET=1", encoding="utf-8")
    pkg = tmp_path / "pkg"
    pkg.mkdir()

    result = merge_assets(_compiled(pkg, tmp_path), AssetConfig(), workspace=tmp_path)

    assert result.copied == ("index.html",)
    assert not (pkg / ".DS_Store").exists()
    assert not (pkg / ".env.local").exists()


def test_dot_pattern_includes_hidden_files(tmp_path: Path) -> None:
    html = tmp_path / "html"
    html.mkdir()
    (html / ".htaccess").write_text("Options -Indexes", encoding="utf-8")
    pkg = tmp_path / "pkg"
    pkg.mkdir()

    result = merge_assets(_compiled(pkg, tmp_path), AssetConfig(pattern=".*"), workspace=tmp_path)

    assert result.copied == (".htaccess",)
