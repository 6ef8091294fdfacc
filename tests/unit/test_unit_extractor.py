from game_localizer.unit_extractor import extract_translatable_units


def test_units_are_ordered_and_unique():
    texts = [
        "Hello there. General Kenobi.",
        "Hello there.",
        "#IF(x)#THEN(Yes.)#ELSE(No.)#END",
    ]
    assert extract_translatable_units(texts) == ["Hello there.", "General Kenobi.", "Yes.", "No."]


def test_known_keys_are_left_out(sample_dictionary):
    texts = ["Welcome home. Mind the step.", "Sword, Shield, Bow"]
    assert extract_translatable_units(texts, known_keys=sample_dictionary) == ["Mind the step.", "Bow"]


def test_progress_bar_does_not_change_result():
    texts = ["One sentence.", "Another one."]
    assert extract_translatable_units(texts, show_progress=True) == ["One sentence.", "Another one."]


def test_empty_input():
    assert extract_translatable_units([]) == []
