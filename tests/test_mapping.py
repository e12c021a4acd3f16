from cbm_writing_scorer.grammar import normalize_issues
from cbm_writing_scorer.mapping import map_issues, offset_to_boundary
from cbm_writing_scorer.models import InsertionReason, TriState
from cbm_writing_scorer.tokenization import tokenize
from tests.utils import lt_match


def _map(text: str, *matches, **kwargs):
    tokens = tokenize(text)
    return map_issues(text, tokens, normalize_issues(matches, text), **kwargs)


def test_offset_to_boundary():
    tokens = tokenize("It was dark")
    assert offset_to_boundary(tokens, 0) == 0
    assert offset_to_boundary(tokens, 3) == 1
    assert offset_to_boundary(tokens, 5) == 2
    assert offset_to_boundary(tokens, 11) == 3


def test_spelling_issue_marks_word_bad():
    mapping = _map("The dgo ran.", lt_match(4, 3, ["dog"], category="TYPOS"))
    assert mapping.token_severity == {1: TriState.BAD}
    assert mapping.insertions == []
    assert len(mapping.audit_rows) == 1
    assert mapping.audit_rows[0].span == (4, 7)


def test_spelling_span_marks_every_word_inside():
    mapping = _map("teh dgo ran", lt_match(0, 7, ["the dog"], category="TYPOS"))
    assert mapping.token_severity == {0: TriState.BAD, 1: TriState.BAD}


def test_word_substitution_is_bad():
    mapping = _map("He go home.", lt_match(3, 2, ["goes"]))
    assert mapping.token_severity == {1: TriState.BAD}


def test_capitalization_fix_adds_overlay():
    match = lt_match(0, 2, ["It"], rule_id="UPPERCASE_SENTENCE_START", category="CASING")
    mapping = _map("it was fun.", match)
    assert mapping.token_severity == {0: TriState.BAD}
    assert mapping.overlays == {0: "It"}
    # Nothing precedes the first word, so no sentence break is proposed.
    assert mapping.insertions == []


def test_capitalization_overlay_can_be_disabled():
    match = lt_match(0, 2, ["It"], rule_id="UPPERCASE_SENTENCE_START", category="CASING")
    mapping = _map("it was fun.", match, show_capitalization_overlay=False)
    assert mapping.token_severity == {0: TriState.BAD}
    assert mapping.overlays == {}


def test_uppercase_sentence_start_proposes_break_before_word():
    text = "It was fun the dog ran."
    match = lt_match(11, 3, ["The"], rule_id="UPPERCASE_SENTENCE_START", category="CASING")
    mapping = _map(text, match)
    assert mapping.token_severity == {3: TriState.BAD}
    assert [ins.before_b_index for ins in mapping.insertions] == [3]
    insertion = mapping.insertions[0]
    assert insertion.char == "."
    assert insertion.reason is InsertionReason.GRAMMAR_CHECKER
    assert insertion.at == 10


def test_remaining_grammar_issue_is_advisory():
    mapping = _map("I walked home.", lt_match(0, 8, ["I have walked"]))
    assert mapping.token_severity == {0: TriState.MAYBE}


def test_bad_dominates_maybe_in_either_order():
    advisory = lt_match(0, 8, ["I have walked"])
    substitution = lt_match(0, 1, ["Me"])
    assert _map("I walked home.", advisory, substitution).token_severity == {0: TriState.BAD}
    assert _map("I walked home.", substitution, advisory).token_severity == {0: TriState.BAD}


def test_embedded_terminal_becomes_insertion():
    text = "It was dark nobody came."
    mapping = _map(text, lt_match(7, 4, ["dark."], category="PUNCTUATION"))
    assert mapping.token_severity == {}
    assert [ins.before_b_index for ins in mapping.insertions] == [3]
    assert mapping.insertions[0].char == "."
    assert len(mapping.audit_rows) == 1


def test_zero_length_terminal_insert():
    mapping = _map("It was dark nobody came.", lt_match(11, 0, ["!"]))
    assert [(ins.before_b_index, ins.char) for ins in mapping.insertions] == [(3, "!")]


def test_terminal_rule_without_replacement_uses_span_end():
    match = lt_match(5, 4, rule_id="MISSING_SENTENCE_TERMINATOR")
    mapping = _map("Dogs bark cats meow.", match)
    assert [ins.before_b_index for ins in mapping.insertions] == [2]


def test_first_proposal_per_boundary_wins():
    text = "It was dark nobody came."
    mapping = _map(text, lt_match(11, 0, ["."]), lt_match(11, 0, ["!"]))
    assert [(ins.before_b_index, ins.char) for ins in mapping.insertions] == [(3, ".")]
    assert mapping.dropped == 1


def test_end_of_text_insertion_is_dropped_by_default():
    mapping = _map("It was dark", lt_match(11, 0, ["."]))
    assert mapping.insertions == []
    assert mapping.dropped == 1
    assert mapping.audit_rows == []


def test_end_of_text_insertion_can_be_kept():
    mapping = _map("It was dark", lt_match(11, 0, ["."]), keep_end_of_text=True)
    assert [ins.before_b_index for ins in mapping.insertions] == [3]


def test_non_terminal_punctuation_changes_nothing():
    mapping = _map("Yes I can.", lt_match(3, 0, [","], category="PUNCTUATION"))
    assert mapping.token_severity == {}
    assert mapping.insertions == []
    assert len(mapping.audit_rows) == 1


def test_issue_without_tokens_is_dropped():
    mapping = _map("   ", lt_match(0, 1, ["x"], category="TYPOS"))
    assert mapping.dropped == 1
    assert mapping.token_severity == {}


def test_out_of_range_issue_does_not_abort_mapping():
    mapping = _map(
        "The dgo ran.",
        lt_match(400, 5, ["x"], category="TYPOS"),
        lt_match(4, 3, ["dog"], category="TYPOS"),
    )
    assert mapping.token_severity.get(1) is TriState.BAD
