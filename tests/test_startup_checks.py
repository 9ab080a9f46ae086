"""Startup self-check outcomes."""

from CORE.startup_checks import StartupSelfCheck


def _check(logger, tmp_path, **kw):
    base = dict(
        enabled_exchanges=["binance", "okx"],
        transport="wechat",
        wechat_webhook="https://example.invalid/hook",
        tg_token="",
        tg_chat_id="",
        log_dir=str(tmp_path / "logs"),
    )
    base.update(kw)
    return StartupSelfCheck(logger, **base).run()


def test_ok_config(logger, tmp_path):
    report = _check(logger, tmp_path)
    assert report.ok
    assert (tmp_path / "logs").is_dir()
    assert "[CHECK] OK" in logger.text("info")


def test_missing_webhook_is_only_a_warning(logger, tmp_path):
    report = _check(logger, tmp_path, wechat_webhook="")
    assert report.ok
    assert any("detection-only" in w for w in report.warnings)


def test_partial_telegram_config_warns(logger, tmp_path):
    report = _check(logger, tmp_path, transport="telegram", tg_token="123:abc")
    assert report.ok
    assert any("partial config" in w for w in report.warnings)


def test_single_exchange_is_an_error(logger, tmp_path):
    report = _check(logger, tmp_path, enabled_exchanges=["binance", "kraken"])
    assert not report.ok
    assert any("kraken" in w for w in report.warnings)
    assert "FAILED" in logger.text("error")


def test_duplicate_exchange_names_warn(logger, tmp_path):
    report = _check(logger, tmp_path, enabled_exchanges=["gate", "gate", "mexc"])
    assert report.ok
    assert any("duplicate" in w for w in report.warnings)
