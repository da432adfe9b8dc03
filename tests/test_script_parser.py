from app.services.ai.script_parser import (
    RegexScriptParser,
    parse_structured_script,
    split_sentences,
)
from tests.conftest import block, script


def as_pairs(lines):
    return [(line.sentence, line.action) for line in lines]


def test_parses_blocks_and_discards_trailing_content() -> None:
    raw = (
        '"sentence": "Hello world" "action": "happy" END_SENTENCE '
        '"sentence": "Bye" END_SENTENCE END_SUMMARY trailing junk'
    )
    assert as_pairs(parse_structured_script(raw)) == [("Hello world", "happy"), ("Bye", None)]


def test_plain_text_falls_back_to_sentence_splitting() -> None:
    raw = "Just a plain sentence. And another one!"
    assert as_pairs(parse_structured_script(raw)) == [
        ("Just a plain sentence.", None),
        ("And another one!", None),
    ]


def test_empty_and_non_string_input_yield_nothing() -> None:
    assert parse_structured_script("") == []
    assert parse_structured_script(None) == []
    assert parse_structured_script(42) == []
    assert parse_structured_script(["sentence"]) == []


def test_whitespace_only_input_yields_nothing() -> None:
    assert parse_structured_script("   \n\t ") == []


def test_n_blocks_give_n_lines_in_order() -> None:
    sentences = [f"Sentence number {i}" for i in range(7)]
    raw = script(*(block(s, "thinking") for s in sentences))
    lines = parse_structured_script(raw)
    assert [line.sentence for line in lines] == sentences
    assert all(line.action == "thinking" for line in lines)


def test_blocks_after_terminal_delimiter_are_ignored() -> None:
    raw = script(block("Kept", "happy")) + "\n" + block("Dropped", "angry") + "END_SUMMARY"
    assert as_pairs(parse_structured_script(raw)) == [("Kept", "happy")]


def test_empty_sentence_block_is_dropped() -> None:
    raw = script(block("First"), block(""), block("Third", "shrug"))
    assert as_pairs(parse_structured_script(raw)) == [("First", None), ("Third", "shrug")]


def test_block_without_sentence_field_is_dropped() -> None:
    raw = script(block("Real one"), '"action": "laugh"\nEND_SENTENCE\n', "chatter END_SENTENCE ")
    assert as_pairs(parse_structured_script(raw)) == [("Real one", None)]


def test_missing_action_is_none() -> None:
    lines = parse_structured_script(script(block("No cue here")))
    assert lines[0].action is None


def test_empty_action_is_none() -> None:
    lines = parse_structured_script('"sentence": "Quiet" "action": "" END_SENTENCE')
    assert as_pairs(lines) == [("Quiet", None)]


def test_labels_and_delimiters_are_case_insensitive() -> None:
    raw = '"Sentence": "Loud" "ACTION": "excited" end_sentence "SENTENCE" : "Soft" End_Sentence'
    assert as_pairs(parse_structured_script(raw)) == [("Loud", "excited"), ("Soft", None)]


def test_terminal_delimiter_without_block_delimiters() -> None:
    raw = '"sentence": "Only one" "action": "happy" END_SUMMARY "sentence": "ghost"'
    assert as_pairs(parse_structured_script(raw)) == [("Only one", "happy")]


def test_first_match_wins_inside_a_block() -> None:
    raw = '"sentence": "A" "sentence": "B" "action": "x" "action": "y" END_SENTENCE'
    assert as_pairs(parse_structured_script(raw)) == [("A", "x")]


def test_fallback_stops_at_terminal_delimiter() -> None:
    raw = "The model ignored the format. It rambled on! END_SUMMARY Extra words here."
    assert as_pairs(parse_structured_script(raw)) == [
        ("The model ignored the format.", None),
        ("It rambled on!", None),
    ]


def test_fallback_keeps_question_marks_and_unterminated_tail() -> None:
    assert [line.sentence for line in split_sentences("Why? Because.  And then")] == [
        "Why?",
        "Because.",
        "And then",
    ]


def test_regex_parser_wraps_function() -> None:
    raw = script(block("Hello", "happy"))
    assert RegexScriptParser().parse(raw) == parse_structured_script(raw)
