def test_import_codex_package() -> None:
    import importlib

    module = importlib.import_module("codex")
    assert module is not None
    assert hasattr(module, "Story")


def test_import_rng_no_side_effects() -> None:
    from codex.core.rng import RNG

    rng = RNG(42)
    value = rng.randint(0, 1)
    assert value in (0, 1)
