"""Property-based tests for the diff engine.

Uses Hypothesis to check invariants over arbitrary texts:
1. Identical texts diff to nothing
2. Accepting every hunk reproduces the modified text, in any order
3. Pending and rejected modifications never change the text
4. Every produced modification carries complete metadata
"""

from hypothesis import Phase, given, settings, strategies as st

from change_review.models import ModificationStatus, ModificationType
from change_review.utils.diff_engine import (
    apply_modifications,
    compute_diff,
    diff_to_modifications,
    split_lines,
)

# Strategies
# A small line alphabet makes matching lines (and so mixed hunks) likely
line_strategy = st.sampled_from(["", "a", "b", "c", "the end", "  indented", "x\r"])
document_strategy = st.lists(line_strategy, max_size=15).map("\n".join)
any_text_strategy = st.text(max_size=200)
unaccepted_strategy = st.sampled_from([ModificationStatus.PENDING, ModificationStatus.REJECTED])


class TestComputeDiffProperties:
    """Property-based tests for compute_diff."""

    @given(text=any_text_strategy)
    @settings(max_examples=100, phases=[Phase.generate])
    def test_identical_texts_have_empty_diff(self, text: str):
        diff = compute_diff(text, text)

        assert diff.hunks == []
        assert diff.stats.additions == 0
        assert diff.stats.deletions == 0
        assert diff.stats.modifications == 0

    @given(original=any_text_strategy, modified=any_text_strategy)
    @settings(max_examples=100, phases=[Phase.generate])
    def test_stats_count_hunk_lines(self, original: str, modified: str):
        diff = compute_diff(original, modified)

        added = sum(
            len(split_lines(h.modified_text)) for h in diff.hunks if h.type == ModificationType.ADD
        )
        removed = sum(
            h.line_end - h.line_start + 1 for h in diff.hunks if h.type == ModificationType.DELETE
        )
        changed = sum(
            h.line_end - h.line_start + 1 for h in diff.hunks if h.type == ModificationType.MODIFY
        )
        assert (diff.stats.additions, diff.stats.deletions, diff.stats.modifications) == (
            added, removed, changed,
        )

    @given(original=document_strategy, modified=document_strategy)
    @settings(max_examples=100, phases=[Phase.generate])
    def test_hunks_are_in_document_order(self, original: str, modified: str):
        starts = [hunk.line_start for hunk in compute_diff(original, modified).hunks]
        assert starts == sorted(starts)

    @given(original=document_strategy, modified=document_strategy)
    @settings(max_examples=50, phases=[Phase.generate])
    def test_is_deterministic(self, original: str, modified: str):
        assert compute_diff(original, modified) == compute_diff(original, modified)


class TestApplyProperties:
    """Property-based tests for applying diff-derived modifications."""

    @given(original=document_strategy, modified=document_strategy, data=st.data())
    @settings(max_examples=200, phases=[Phase.generate])
    def test_accepting_every_hunk_reproduces_modified(self, original: str, modified: str, data):
        mods = diff_to_modifications(compute_diff(original, modified))
        for mod in mods:
            mod.status = ModificationStatus.ACCEPTED
        shuffled = data.draw(st.permutations(mods))

        assert apply_modifications(original, shuffled) == modified

    @given(original=any_text_strategy, modified=any_text_strategy)
    @settings(max_examples=100, phases=[Phase.generate])
    def test_round_trip_on_arbitrary_text(self, original: str, modified: str):
        mods = diff_to_modifications(compute_diff(original, modified))
        for mod in mods:
            mod.status = ModificationStatus.ACCEPTED

        assert apply_modifications(original, mods) == modified

    @given(original=document_strategy, modified=document_strategy, data=st.data())
    @settings(max_examples=100, phases=[Phase.generate])
    def test_unaccepted_modifications_are_a_no_op(self, original: str, modified: str, data):
        mods = diff_to_modifications(compute_diff(original, modified))
        for mod in mods:
            mod.status = data.draw(unaccepted_strategy)

        assert apply_modifications(original, mods) == original


class TestMetadataProperties:
    """Property-based tests for diff_to_modifications output."""

    @given(original=any_text_strategy, modified=any_text_strategy)
    @settings(max_examples=100, phases=[Phase.generate])
    def test_every_modification_is_complete(self, original: str, modified: str):
        diff = compute_diff(original, modified)
        mods = diff_to_modifications(diff)

        assert len(mods) == len(diff.hunks)
        assert len({mod.id for mod in mods}) == len(mods)
        for mod, hunk in zip(mods, diff.hunks):
            assert mod.id
            assert mod.type in set(ModificationType)
            assert mod.line_end >= mod.line_start >= 1
            assert mod.status == ModificationStatus.PENDING
            assert (mod.type, mod.line_start, mod.line_end) == (
                hunk.type, hunk.line_start, hunk.line_end,
            )
            if mod.type == ModificationType.ADD:
                assert mod.original_text is None and mod.modified_text is not None
            elif mod.type == ModificationType.DELETE:
                assert mod.original_text is not None and mod.modified_text is None
            else:
                assert mod.original_text is not None and mod.modified_text is not None
