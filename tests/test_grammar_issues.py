from cbm_writing_scorer.grammar import normalize_issue, normalize_issues, normalize_response
from cbm_writing_scorer.models import EditType, GrammarIssue, IssueCategory
from tests.utils import lt_match

TEXT = "The dgo ran home"


def test_languagetool_match_is_normalized():
    raw = lt_match(4, 3, ["dog", "dig"], rule_id="MORFOLOGIK_RULE_EN_US", category="TYPOS")
    issue = normalize_issue(raw, TEXT)

    assert issue == GrammarIssue(
        offset=4,
        length=3,
        category=IssueCategory.SPELLING,
        rule_id="MORFOLOGIK_RULE_EN_US",
        message=raw["message"],
        replacements=("dog", "dig"),
        edit_type=EditType.MODIFY,
    )


def test_loose_languagetool_shape():
    raw = {
        "fromPos": 4,
        "toPos": 7,
        "ruleId": "HUNSPELL_RULE",
        "msg": "Possible typo",
        "replacements": [{"val": "dog"}],
    }
    issue = normalize_issue(raw, TEXT)
    assert issue is not None
    assert (issue.offset, issue.length) == (4, 3)
    assert issue.category is IssueCategory.SPELLING
    assert issue.message == "Possible typo"
    assert issue.replacements == ("dog",)


def test_context_offsets_are_used_when_top_level_missing():
    raw = {"context": {"offset": 8, "length": 3}, "categoryId": "GRAMMAR"}
    issue = normalize_issue(raw, TEXT)
    assert issue is not None
    assert (issue.offset, issue.end) == (8, 11)
    assert issue.category is IssueCategory.GRAMMAR


def test_grammarbot_edit_shape():
    raw = {
        "start": 16,
        "end": 16,
        "replace": ".",
        "err_cat": "PUNC",
        "err_desc": "Add a period",
        "edit_type": "ADD",
    }
    issue = normalize_issue(raw, TEXT)
    assert issue is not None
    assert issue.category is IssueCategory.PUNCTUATION
    assert issue.edit_type is EditType.INSERT
    assert issue.replacements == (".",)
    assert issue.message == "Add a period"


def test_out_of_range_offsets_are_clamped():
    issue = normalize_issue(lt_match(40, 10, ["x"]), TEXT)
    assert issue is not None
    assert issue.offset == len(TEXT)
    assert issue.length == 0

    negative = normalize_issue(lt_match(-5, 8, ["x"]), TEXT)
    assert negative is not None
    assert (negative.offset, negative.end) == (0, 3)


def test_unusable_entries_are_dropped():
    issues = normalize_issues(["junk", None, {"message": "no offset"}, lt_match(0, 3)], TEXT)
    assert len(issues) == 1
    assert issues[0].offset == 0


def test_terminal_rules_are_punctuation():
    issue = normalize_issue(lt_match(12, 4, rule_id="PUNCTUATION_PARAGRAPH_END"), TEXT)
    assert issue is not None
    assert issue.category is IssueCategory.PUNCTUATION


def test_casing_rules_are_grammar():
    issue = normalize_issue(
        lt_match(0, 3, ["THE"], rule_id="UPPERCASE_SENTENCE_START", category="CASING"), TEXT
    )
    assert issue is not None
    assert issue.category is IssueCategory.GRAMMAR


def test_normalize_response_unwraps_known_envelopes():
    match = lt_match(4, 3, ["dog"], category="TYPOS")
    assert len(normalize_response({"matches": [match]}, TEXT)) == 1
    assert len(normalize_response({"edits": [match]}, TEXT)) == 1
    assert len(normalize_response([match], TEXT)) == 1
    assert normalize_response({"unexpected": True}, TEXT) == []
    assert normalize_response(None, TEXT) == []


def test_strict_issues_are_reclamped():
    issue = GrammarIssue(offset=10, length=50, category=IssueCategory.GRAMMAR)
    normalized = normalize_issue(issue, TEXT)
    assert normalized is not None
    assert normalized.end == len(TEXT)


def test_utf16_offsets_are_converted_for_astral_text():
    text = "😀 teh cat"
    # The emoji takes two UTF-16 code units, so "teh" starts at unit 3.
    issues = normalize_issues([lt_match(3, 3, ["the"], category="TYPOS")], text)
    assert text[issues[0].offset : issues[0].end] == "teh"
