"""Tests for the uvicorn entrypoint."""

from image_describer import main as main_module


def test_main_serves_on_configured_port(monkeypatch, settings, container) -> None:
    monkeypatch.setattr(main_module, "Settings", lambda: settings)
    monkeypatch.setattr(main_module, "build_container", lambda _settings: container)
    served: list[tuple[object, str, int]] = []
    monkeypatch.setattr(
        main_module.uvicorn,
        "run",
        lambda app, host, port: served.append((app, host, port)),
    )

    main_module.main()

    assert len(served) == 1
    _, host, port = served[0]
    assert (host, port) == ("0.0.0.0", 9000)
