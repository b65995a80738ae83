from __future__ import annotations

from claimreport.content.classifier import (
    BlockKind,
    ClassifierState,
    classify,
    classify_line,
    group_sections,
    is_preamble,
    step,
)


class TestClassifyLine:
    def test_bullet_marker_is_stripped(self):
        block = classify_line('* Replace roof')
        assert block.kind == BlockKind.bullet
        assert block.text == 'Replace roof'

    def test_all_bullet_markers(self):
        for line in ('- Replace roof', '+ Replace roof', '  * Replace roof'):
            assert classify_line(line).kind == BlockKind.bullet

    def test_numbered_keeps_index(self):
        block = classify_line('2. Inspect wiring')
        assert block.kind == BlockKind.numbered
        assert block.index == 2
        assert block.text == 'Inspect wiring'

    def test_catalogued_header_wins_over_subsection(self):
        block = classify_line('REMARKS:')
        assert block.kind == BlockKind.header
        assert block.text == 'REMARKS:'

    def test_header_match_is_case_insensitive(self):
        assert classify_line('Dwelling Damage').kind == BlockKind.header
        assert classify_line('**ROOF**').kind == BlockKind.header
        assert classify_line('**ROOF**').text == 'ROOF'

    def test_header_with_trailing_text(self):
        block = classify_line('COVERAGE: HO-3 policy in force')
        assert block.kind == BlockKind.header

    def test_header_label_must_not_be_a_prefix_of_a_word(self):
        assert classify_line('Roofing was replaced in 2019.').kind == BlockKind.paragraph

    def test_all_caps_label_is_header(self):
        assert classify_line('FIRE').kind == BlockKind.header
        assert classify_line('CAUSE OF LOSS:').kind == BlockKind.header

    def test_short_caps_word_stays_paragraph(self):
        assert classify_line('OK').kind == BlockKind.paragraph
        assert classify_line('NO').kind == BlockKind.paragraph
        assert classify_line('ALE').kind == BlockKind.header

    def test_short_colon_line_is_subsection(self):
        block = classify_line('Roof condition:')
        assert block.kind == BlockKind.subsection
        assert block.text == 'Roof condition:'

    def test_long_colon_line_is_paragraph(self):
        line = 'The adjuster noted the following items during the walkthrough of the insured property:'
        assert len(line) >= 80
        assert classify_line(line).kind == BlockKind.paragraph

    def test_blank_and_separator(self):
        assert classify_line('   ').kind == BlockKind.blank
        for line in ('---', '___', '...'):
            block = classify_line(line)
            assert block.kind == BlockKind.blank
            assert block.separator

    def test_unmatched_line_is_paragraph(self):
        block = classify_line('  Water staining observed near the window.  ')
        assert block.kind == BlockKind.paragraph
        assert block.text == 'Water staining observed near the window.'


class TestPreambleSuppression:
    def test_preamble_dropped_until_first_header(self):
        blocks = classify('Here is the report.\n\nFIRE\nDamage noted.')
        assert [b.kind for b in blocks] == [BlockKind.blank, BlockKind.header, BlockKind.paragraph]
        assert blocks[1].text == 'FIRE'
        assert blocks[2].text == 'Damage noted.'

    def test_preamble_phrase_after_content_is_kept(self):
        blocks = classify('REMARKS\nHere is what we found.')
        assert blocks[-1].kind == BlockKind.paragraph
        assert blocks[-1].text == 'Here is what we found.'

    def test_paragraph_does_not_end_suppression(self):
        blocks = classify('Intro line.\nAs requested, the report follows.\nREMARKS')
        assert [b.kind for b in blocks] == [BlockKind.paragraph, BlockKind.header]

    def test_bullet_ends_suppression(self):
        blocks = classify('- First item\nHere is a note.')
        assert [b.kind for b in blocks] == [BlockKind.bullet, BlockKind.paragraph]

    def test_step_is_pure(self):
        state = ClassifierState()
        dropped = step(state, "I've generated the following report")
        assert dropped == state

        kept = step(state, 'ROOF')
        assert kept.suppressing is False
        assert len(kept.blocks) == 1
        assert state.blocks == ()

    def test_is_preamble(self):
        assert is_preamble('  Below is the summary')
        assert not is_preamble('The roof is below standard')


class TestClassify:
    def test_source_lines_round_trip(self):
        text = 'REMARKS:\n* one\n2. two\n\nRoof:\nplain text\n---'
        blocks = classify(text)
        assert '\n'.join(block.source for block in blocks) == text

    def test_line_endings_normalized(self):
        blocks = classify('ROOF\r\nShingles missing.\rGutters bent.')
        assert [b.text for b in blocks] == ['ROOF', 'Shingles missing.', 'Gutters bent.']

    def test_empty_input(self):
        blocks = classify('')
        assert [b.kind for b in blocks] == [BlockKind.blank]

    def test_sample_report(self, sample_report):
        kinds = [b.kind for b in classify(sample_report)]
        assert kinds[0] == BlockKind.blank
        assert kinds.count(BlockKind.header) == 3
        assert kinds.count(BlockKind.bullet) == 2
        assert kinds.count(BlockKind.numbered) == 2
        assert kinds.count(BlockKind.subsection) == 1


class TestGroupSections:
    def test_groups_blocks_under_headers(self, sample_report):
        sections = group_sections(classify(sample_report))
        assert [s.title for s in sections] == ['REMARKS:', 'DWELLING DAMAGE', 'RECOMMENDATION']
        assert sections[-1].blocks[-1].text == 'Proceed with mitigation.'

    def test_keeps_untitled_lead_with_content(self):
        sections = group_sections(classify('- loose item\nROOF\nok'))
        assert sections[0].title is None
        assert sections[0].blocks[0].text == 'loose item'
        assert sections[1].title == 'ROOF'
