"""Minimal example scoring one sample with the public LanguageTool server."""

from __future__ import annotations

import logging

from cbm_writing_scorer.config import ScorerConfig
from cbm_writing_scorer.grammar import build_checker_from_config
from cbm_writing_scorer.session import ScoringSession


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    config = ScorerConfig()
    config.languagetool.enabled = True

    sample_text = (
        "my dog is big he likes to run in the park\n"
        "Last Saturday we went to the Lake Harriet Bandshell and he swam"
    )
    session = ScoringSession(config)
    session.update_text(sample_text)
    if not session.run_check(build_checker_from_config(config)):
        print("LanguageTool unavailable; showing heuristic proposals only.")

    for insertion in session.insertions:
        print(f"boundary {insertion.before_b_index}: add '{insertion.char}' ({insertion.reason.value})")
    for row in session.audit_rows():
        print(f"{row.tag}: {row.message} {row.span}")
    print(session.kpis(elapsed_minutes=3.0))


if __name__ == "__main__":
    main()
