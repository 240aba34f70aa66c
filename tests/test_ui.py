"""Smoke tests for the UI module and CLI (no display required)."""

from __future__ import annotations

import pytest

from gardensim.ui.pygame_client import PygameRenderer, _lerp, _stage_scale


def test_pygame_renderer_importable() -> None:
    """PygameRenderer class is importable without initialising pygame."""
    assert PygameRenderer is not None


def test_main_module_importable() -> None:
    """The __main__ module is importable and exposes main()."""
    from gardensim.__main__ import main

    assert callable(main)


def test_lerp() -> None:
    assert _lerp(2.0, 4.0, 0.0) == 2.0
    assert _lerp(2.0, 4.0, 0.5) == pytest.approx(3.0)
    assert _lerp(2.0, 4.0, 1.0) == 4.0


def test_plants_grow_on_screen() -> None:
    stages = ["SEED", "SPROUT", "VEGETATIVE", "FLOWERING", "FRUITING", "MATURE"]
    scales = [_stage_scale(s) for s in stages]
    assert scales == sorted(scales)


def test_headless_run(capsys: pytest.CaptureFixture[str]) -> None:
    """Headless mode runs the requested ticks and prints module status."""
    from gardensim.__main__ import main

    main(["--headless", "--ticks", "5", "--log-level", "ERROR"])
    out = capsys.readouterr().out
    assert "--- TICK 5 STATUS" in out
    assert "Watering" in out
