import logging

import pytest

from game_localizer.dictionary import load_dictionary
from game_localizer.host import GameHost
from game_localizer.translation_service import TranslationService


class StubHost(GameHost):
    """Host double with a configurable player and an in-memory missing-key ledger."""

    def __init__(self, player_name=None, player_gender=None, fail=False):
        super().__init__()
        self.player_name = player_name
        self.player_gender = player_gender
        self.fail = fail
        self.reported_keys = []

    def get_current_player_name(self):
        if self.fail:
            raise RuntimeError("player object not loaded")
        return self.player_name

    def get_current_player_gender(self):
        if self.fail:
            raise RuntimeError("player object not loaded")
        return self.player_gender

    def report_missing_key(self, key):
        self.reported_keys.append(key)


SAMPLE_ENTRIES = [
    ("Hello, traveler!", "Salut, voyageur!"),
    ("Welcome home.", "Bienvenue chez toi."),
    ("Who are you?", "Qui es-tu?"),
    ("Open Door", "Öffne Tür"),
    ("Don't move.", "Ne bouge pas."),
    ("You found {ITEM}.", "Tu as trouvé {ITEM}."),
    ("Potion of {ITEM}", "Potion de {ITEM}"),
    ("Healing", "Soin"),
    ("Sword", "Épée"),
    ("Shield", "Bouclier"),
    ("{PLAYER}, you are late.", "{PLAYER}, tu es en retard."),
    ("Draw your blade.", "Prends {IFHE son épée|sa lame}."),
    ("Roses are red", "Les roses sont rouges"),
    ("Violets are blue", "Les violettes sont bleues"),
]


@pytest.fixture(autouse=True)
def quiet_package_logger():
    """Let pytest's caplog see package records even if a test configured the package logger."""
    logger = logging.getLogger("game_localizer")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    logger.handlers.clear()
    logger.propagate = True
    yield
    logger.handlers[:] = handlers
    logger.propagate = propagate
    logger.setLevel(level)


@pytest.fixture
def sample_entries():
    return list(SAMPLE_ENTRIES)


@pytest.fixture
def sample_dictionary(sample_entries):
    return load_dictionary(sample_entries)


@pytest.fixture
def stub_host():
    return StubHost()


@pytest.fixture
def service(stub_host, sample_entries):
    translation_service = TranslationService(host=stub_host)
    translation_service.activate_language(sample_entries, "fr")
    return translation_service


@pytest.fixture
def make_host():
    """Factory for hosts with a given player name and gender."""
    return StubHost
