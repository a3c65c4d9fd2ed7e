import pytest

from fatefi.cli.admin import main
from fatefi.services.tarot import draw_card_for_date


def test_draw_prints_card_for_date(capsys):
    assert main(["draw", "2025-03-14"]) == 0
    card, orientation = draw_card_for_date("2025-03-14")
    assert capsys.readouterr().out.strip() == f"2025-03-14: {card.name} ({orientation.value})"


def test_rejects_malformed_date():
    with pytest.raises(SystemExit):
        main(["draw", "14/03/2025"])


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])
