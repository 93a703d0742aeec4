"""Tests for chunking.sentence_splitter."""

from chunking.sentence_splitter import split_sentences


class TestSplitSentences:
    def test_simple(self):
        assert split_sentences("This is one. This is two.") == ["This is one.", "This is two."]

    def test_question_and_exclamation(self):
        assert split_sentences("Does it work? Yes! Good.") == ["Does it work?", "Yes!", "Good."]

    def test_empty_and_whitespace(self):
        assert split_sentences("") == []
        assert split_sentences("   \n  ") == []

    def test_multi_part_abbreviation(self):
        sentences = split_sentences("Use sensors, e.g. cameras. They see depth.")
        assert sentences == ["Use sensors, e.g. cameras.", "They see depth."]

    def test_title_abbreviation(self):
        sentences = split_sentences("Dr. Smith built the robot. It works.")
        assert sentences == ["Dr. Smith built the robot.", "It works."]

    def test_paragraph_break_is_boundary(self):
        sentences = split_sentences("Sensors\n\nDepth cameras measure distance.")
        assert sentences == ["Sensors", "Depth cameras measure distance."]

    def test_enumeration_not_split(self):
        sentences = split_sentences("1. Install the package\n2. Run the server")
        assert len(sentences) == 1
        assert sentences[0].startswith("1. Install")

    def test_whitespace_collapsed(self):
        assert split_sentences("Too    many\n spaces here.") == ["Too many spaces here."]
