from datetime import date

from licensing import (
    SOURCES, LICENCE_NOTES, generate_attribution_markdown, generate_licence_notes_markdown
)


def test_every_source_is_listed_once():
    markdown = generate_attribution_markdown()

    lines = markdown.splitlines()
    assert len(lines) == len(SOURCES)
    for source in SOURCES.values():
        assert sum(source.name in line for line in lines) == 1


def test_attribution_uses_current_year():
    assert str(date.today().year) in generate_attribution_markdown()


def test_licence_notes():
    notes = generate_licence_notes_markdown()

    assert notes.count("\n- ") == len(LICENCE_NOTES) - 1
    assert "NS-SeC" in notes
    assert "synthetic" in notes
