"""
Streamlit app tests (streamlit.testing AppTest).
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).parent.parent / "valuta" / "app.py")


@pytest.fixture
def at():
    app = AppTest.from_file(APP_PATH, default_timeout=30)
    app.secrets["EUR_USD_RATE"] = 1.12
    app.run()
    return app


def test_initial_render(at):
    assert not at.exception
    assert at.text_input(key="eur").value == "1"
    assert at.text_input(key="usd").value == "1.12"


def test_eur_edit_updates_usd(at):
    at.text_input(key="eur").input("10").run()
    assert at.text_input(key="usd").value == "11.20"
    assert at.text_input(key="eur").value == "10"


def test_usd_edit_updates_eur(at):
    at.text_input(key="usd").input("2").run()
    assert at.text_input(key="eur").value == "1.79"
    assert at.text_input(key="usd").value == "2"
    assert at.session_state["sync"].active_editor == "usd"


def test_invalid_input_is_ignored(at):
    at.text_input(key="usd").input("abc").run()
    assert not at.exception
    assert at.text_input(key="eur").value == "1"


def test_reset_button(at):
    at.text_input(key="eur").input("50").run()
    at.button(key="btn_reset").click().run()
    assert at.text_input(key="eur").value == "1"
    assert at.text_input(key="usd").value == "1.12"


def test_zero_rate_reports_configuration_error():
    app = AppTest.from_file(APP_PATH, default_timeout=30)
    app.secrets["EUR_USD_RATE"] = 0
    app.run()
    assert len(app.error) == 1
    assert "Hibás beállítás" in app.error[0].value
    assert len(app.text_input) == 0
