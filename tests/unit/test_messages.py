"""Tests for localized message lookup."""

import pytest

from app.shared.messages import translate


def test_formats_placeholders() -> None:
    text = translate("notify.reminder.body", locale="en", title="Prep", minutes=30)
    assert text == 'The task "Prep" is due within 30 minutes.'


def test_vietnamese_catalog() -> None:
    assert translate("auth.wrong_password", locale="vi") == "Mật khẩu không chính xác."


def test_unknown_locale_falls_back_to_english() -> None:
    assert translate("gate.unknown_predecessor", locale="fr") == "Previous assignee"


def test_default_locale_comes_from_settings() -> None:
    assert translate("profile.default_dept") == "Unassigned"


def test_unknown_key_raises() -> None:
    with pytest.raises(KeyError):
        translate("no.such.key", locale="en")
