from cbm_writing_scorer.heuristics import detect_missing_terminals, merge_insertions
from cbm_writing_scorer.models import InsertionReason, VirtualTerminalInsertion
from cbm_writing_scorer.tokenization import tokenize


def _detect(text: str, **kwargs):
    return detect_missing_terminals(text, tokenize(text), **kwargs)


def _capital_proposals(text: str):
    return [
        ins for ins in _detect(text) if ins.reason is InsertionReason.CAPITAL_AFTER_SPACE
    ]


def test_capital_after_word_is_flagged():
    insertions = _detect("It was dark Nobody came.")
    assert len(insertions) == 1
    insertion = insertions[0]
    assert insertion.before_b_index == 3
    assert insertion.reason is InsertionReason.CAPITAL_AFTER_SPACE
    assert insertion.char == "."
    assert insertion.at == 11


def test_title_case_run_is_not_flagged():
    assert _capital_proposals("the forest The Terrible Day was calm.") == []


def test_abbreviation_suppresses_flag():
    assert _detect("We ate apples etc Then we left.") == []
    assert [ins.before_b_index for ins in _detect("We ate apples Then we left.")] == [3]


def test_pronoun_i_and_proper_nouns_are_not_flagged():
    assert _detect("Yesterday I went home.") == []
    assert _detect("Then I'm going home.") == []
    assert _detect("We left on Monday morning.") == []


def test_extra_proper_nouns_are_honoured():
    text = "We visited grandma Rosa today."
    assert len(_detect(text)) == 1
    assert _detect(text, proper_nouns={"Rosa"}) == []


def test_non_essential_punctuation_blocks_flag():
    assert _detect("It was dark, Nobody came.") == []
    assert _detect('He said "stop" Then left.') == []


def test_paragraph_end_without_terminal_is_flagged():
    insertions = _detect("I like dogs\nThey run fast.")
    assert [(ins.before_b_index, ins.reason) for ins in insertions] == [
        (3, InsertionReason.PARAGRAPH_END)
    ]
    assert insertions[0].at == 11


def test_final_paragraph_is_never_flagged():
    assert _detect("I like dogs.\nThey run fast") == []
    insertions = _detect("I like dogs\nThey run fast\n")
    assert [ins.before_b_index for ins in insertions] == [3]


def test_paragraph_before_terminated_final_paragraph_is_flagged():
    insertions = _detect("The dog ran home\nThe cat sat.")
    assert [(ins.before_b_index, ins.reason) for ins in insertions] == [
        (4, InsertionReason.PARAGRAPH_END)
    ]
    assert insertions[0].at == 16


def test_empty_paragraphs_are_skipped():
    insertions = _detect("I like dogs\n\n\nThey run fast")
    assert [ins.before_b_index for ins in insertions] == [3]


def test_windows_line_endings_split_paragraphs():
    insertions = _detect("I like dogs\r\nThey run")
    assert [ins.before_b_index for ins in insertions] == [3]


def test_already_proposed_boundaries_are_skipped():
    assert _detect("It was dark Nobody came.", proposed={3}) == []


def test_passes_can_be_disabled():
    assert _detect("It was dark Nobody came.", capital_pass=False) == []
    assert _detect("I like dogs\nThey run fast.", paragraph_pass=False) == []


def test_detection_is_pure():
    text = "It was dark Nobody came.\nThe end"
    assert _detect(text) == _detect(text)


def test_merge_prefers_primary_proposals():
    primary = VirtualTerminalInsertion(3, "!", InsertionReason.GRAMMAR_CHECKER, "Add !")
    fallback = [
        VirtualTerminalInsertion(3, ".", InsertionReason.CAPITAL_AFTER_SPACE, "guess"),
        VirtualTerminalInsertion(1, ".", InsertionReason.PARAGRAPH_END, "guess"),
    ]
    merged = merge_insertions([primary], fallback)
    assert [ins.before_b_index for ins in merged] == [1, 3]
    assert merged[1] is primary
