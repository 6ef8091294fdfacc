import pytest

from game_localizer.sentence_segmenter import (
    ABBREVIATION_MASK,
    PARAGRAPH_MARKER,
    mask_abbreviations,
    parse,
    pre_normalize,
    strip_outer_sentence_quotes,
    unmask_abbreviations,
)


class TestPreNormalize:
    def test_annotations_are_removed(self):
        assert pre_normalize("Hello there. ;; dev note") == "Hello there. "

    def test_blank_line_becomes_paragraph_marker(self):
        assert pre_normalize("One.\n\nTwo.") == f"One.{PARAGRAPH_MARKER}Two."

    def test_star_only_lines_are_dropped(self):
        assert "*" not in pre_normalize("One.\n  ***  \nTwo.")

    def test_conditional_typos_are_repaired(self):
        assert pre_normalize("# -IF(x)#THEN(A-)#ELSE(B) #END") == "#IF(x)#THEN(A)#ELSE(B)#END"


class TestAbbreviationMasking:
    def test_mask_round_trip(self):
        text = "Roll DMG. now"
        masked = mask_abbreviations(text)
        assert ABBREVIATION_MASK in masked
        assert unmask_abbreviations(masked) == text

    def test_abbreviation_does_not_end_a_sentence(self):
        assert parse("STR. is high.") == ["STR. is high."]

    def test_normal_sentence_end_still_splits(self):
        assert parse("STR. is high. Then it drops.") == ["STR. is high.", "Then it drops."]


class TestParse:
    def test_empty_input(self):
        assert parse("") == []

    @pytest.mark.parametrize("text", ["42", "...", "(10)", "   "])
    def test_letterless_input_yields_nothing(self, text):
        assert parse(text) == []

    def test_simple_sentences(self):
        assert parse("Hello there. How are you?") == ["Hello there.", "How are you?"]

    def test_quoted_dialogue_is_split_and_unquoted(self):
        assert parse('"Stop right there!" The guard blocks the way.') == [
            "Stop right there!", "The guard blocks the way."
        ]

    def test_player_name_directive(self):
        assert parse("You look tired, {getName}.") == ["You look tired, {PLAYER}."]

    def test_xp_directive_becomes_its_amount(self):
        assert parse("You gain {addXp|50} experience.") == ["You gain 50 experience."]

    def test_unknown_directive_is_removed(self):
        assert parse("The door opens.{playSound|door}") == ["The door opens."]

    def test_lord_lady_forks_the_sentence(self):
        assert parse("Greetings, my {lordLady}.") == ["Greetings, my lord.", "Greetings, my lady."]

    def test_bracket_actions_become_units(self):
        assert parse("Leave now. [Attack] [Flee]") == ["Leave now.", "Attack", "Flee"]

    def test_html_tags_separate_units(self):
        assert parse("<b>Warning</b> The bridge is out.") == ["Warning", "The bridge is out."]

    def test_trailing_multiplier_is_dropped(self):
        assert parse("Healing Potion x2") == ["Healing Potion"]

    def test_title_list_is_split_on_commas(self):
        assert parse("Sword, Shield, Bow") == ["Sword", "Shield", "Bow"]

    def test_paragraphs_are_separate_units(self):
        assert parse("First line.\n\nSecond line.") == ["First line.", "Second line."]

    def test_numbered_bullet_is_stripped(self):
        assert parse("1) Draw your sword.") == ["Draw your sword."]

    def test_tilde_separates_units(self):
        assert parse("Left~Right") == ["Left", "Right"]

    def test_entry_heading_starts_a_new_unit(self):
        assert "The diary is torn." in parse("ENTRY 12\nThe diary is torn.")

    def test_conditional_branches_in_then_else_order(self):
        text = "Hello, traveler! #IF(x)#THEN(Welcome home.)#ELSE(Who are you?)#END"
        assert parse(text) == ["Hello, traveler!", "Welcome home.", "Hello, traveler!", "Who are you?"]

    def test_repaired_conditional(self):
        assert parse("# -IF(x)#THEN(Yes.)#ELSE(No.)#END") == ["Yes.", "No."]


def test_strip_outer_sentence_quotes_handles_punctuation_after_quote():
    assert strip_outer_sentence_quotes('"Wait!".') == "Wait!"


class TestFragmentCleanup:
    @pytest.mark.parametrize("text, expected", [
        ("You earn {getMoney} coins.", ["You earn {MONEY} coins."]),
        ("Pay {getGold} now.", ["Pay {MONEY} now."]),
    ])
    def test_money_directives(self, text, expected):
        assert parse(text) == expected

    @pytest.mark.parametrize("text", ["{getMoney}", "{getGold}", "{getName}", "{PLAYER}"])
    def test_bare_placeholder_is_dropped(self, text):
        assert parse(text) == []

    @pytest.mark.parametrize("text, expected", [
        ("Healing Potion x2", ["Healing Potion"]),
        ("Damage bonus:x1.5", ["Damage bonus"]),
        ("Ration x2.", ["Ration."]),
        ("Ration x2. Torch x3.", ["Ration.", "Torch."]),
        ("Drink it x1.5!", ["Drink it!"]),
    ])
    def test_multipliers_are_stripped(self, text, expected):
        assert parse(text) == expected

    def test_multiplier_needs_a_separator(self):
        assert parse("Box2 is here.") == ["Box2 is here."]

    @pytest.mark.parametrize("text, expected", [
        ("+1 Strength bonus", ["Strength bonus"]),
        ("1. Open the gate.", ["Open the gate."]),
        ("1) Draw your sword.", ["Draw your sword."]),
    ])
    def test_bullet_prefixes_are_stripped(self, text, expected):
        assert parse(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("Heal 1-3", ["Heal"]),
        ("Share 3/4", ["Share"]),
        ("Wait 15", ["Wait"]),
    ])
    def test_trailing_numbers_are_stripped(self, text, expected):
        assert parse(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("Rest here (10)", ["Rest here"]),
        ("Wait (02:00)", ["Wait"]),
    ])
    def test_letterless_parenthetical_is_stripped(self, text, expected):
        assert parse(text) == expected
