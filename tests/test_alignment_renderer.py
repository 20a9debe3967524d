from models.diff import RenderLayout, RowKind, SegmentType, ViewOptions
from models.review import Comment
from services.alignment_renderer import AlignmentRenderer, columns_for, visible_rows
from services.comment_index import CommentIndex
from services.patched_text_reader import LineCursor, PatchedTextReader
from services.segment_classifier import classify

BASE_ID = 10
DIFF_ID = 11


def numbered_text(count):
    return "".join(f"line {i}\n" for i in range(1, count + 1))


def render_pair(base_text, hunk_text, options=None, comments=(), diff_id=DIFF_ID):
    renderer = AlignmentRenderer(options or ViewOptions())
    base_cursor = LineCursor.from_text(base_text)
    if diff_id == BASE_ID:
        diff_cursor = base_cursor
    else:
        diff_cursor = LineCursor(PatchedTextReader(base_text, hunk_text))
    return renderer.render(
        classify(hunk_text),
        base_cursor,
        diff_cursor,
        CommentIndex(comments),
        BASE_ID,
        diff_id,
    )


def comment(version_id, line, text="needs work", stamp=0):
    return Comment(version_id=version_id, line=line, line_stamp=stamp, user_name="reviewer", text=text)


def visible_base_lines(plan):
    return [row.base_line_number for row in plan.rows() if row.kind is RowKind.LINE]


def test_split_example():
    plan = render_pair("a\nb\nc\nd\n", "2c2\n< b\n---\n> B\n")
    assert plan.layout is RenderLayout.SPLIT
    assert plan.columns == ("Num Base", "Txt Base", "Num Diff", "Txt Diff")
    assert [g.segment_type for g in plan.groups] == [
        SegmentType.UNCHANGED,
        SegmentType.CHANGED,
        SegmentType.UNCHANGED,
    ]

    rows = plan.rows()
    assert [(r.base_line_number, r.base_text, r.diff_line_number, r.diff_text) for r in rows] == [
        (1, "a", 1, "a"),
        (2, "b", 2, "B"),
        (3, "c", 3, "c"),
        (4, "d", 4, "d"),
    ]

    final = plan.groups[-1].segment
    assert not final.is_open_ended
    assert final.base_line_count == 2


def test_ragged_change_is_not_realigned():
    plan = render_pair("a\nb\nc\n", "2c2,3\n< b\n---\n> B1\n> B2\n")
    changed = plan.groups[1]
    assert changed.segment_type is SegmentType.CHANGED
    assert [(r.base_line_number, r.diff_line_number, r.diff_text) for r in changed.rows] == [
        (2, 2, "B1"),
        (None, 3, "B2"),
    ]
    # Diff line numbers continue correctly after the ragged group
    assert [(r.base_line_number, r.diff_line_number) for r in plan.groups[2].rows] == [(3, 4)]


def test_added_and_deleted_groups():
    plan = render_pair("a\nb\nc\n", "1a2\n> new\n3d3\n< c\n")
    types = [g.segment_type for g in plan.groups]
    assert types == [SegmentType.UNCHANGED, SegmentType.ADDED, SegmentType.UNCHANGED, SegmentType.DELETED]

    added = plan.groups[1].rows
    assert [(r.base_line_number, r.diff_line_number, r.diff_text) for r in added] == [(None, 2, "new")]
    deleted = plan.groups[3].rows
    assert [(r.base_line_number, r.base_text, r.diff_line_number) for r in deleted] == [(3, "c", None)]


def test_unified_layout_passes():
    options = ViewOptions(unified_view=True)
    plan = render_pair("a\nb\nc\n", "2c2,3\n< b\n---\n> B1\n> B2\n", options)
    assert plan.layout is RenderLayout.UNIFIED
    assert plan.columns == ("Num Base", "Num Diff", "Txt")

    unchanged = plan.groups[0].rows[0]
    assert (unchanged.base_line_number, unchanged.diff_line_number) == (1, 1)
    assert unchanged.base_text == "a"
    assert unchanged.diff_text is None
    assert unchanged.side is None

    changed = plan.groups[1].rows
    assert [(r.side, r.base_line_number, r.diff_line_number) for r in changed] == [
        ("base", 2, None),
        ("diff", None, 2),
        ("diff", None, 3),
    ]
    assert [r.diff_text for r in changed[1:]] == ["B1", "B2"]


def test_base_on_right_columns():
    plan = render_pair("a\n", "1c1\n< a\n---\n> A\n", ViewOptions(base_on_left=False))
    assert plan.columns == ("Num Diff", "Txt Diff", "Num Base", "Txt Base")
    assert columns_for(RenderLayout.UNIFIED, False) == ("Num Diff", "Num Base", "Txt")


def test_single_revision_mode():
    plan = render_pair("a\nb\n", "", ViewOptions(unified_view=True), diff_id=BASE_ID)
    assert plan.layout is RenderLayout.SINGLE
    assert plan.columns == ("Num Base", "Txt Base")
    assert len(plan.groups) == 1
    assert [(r.base_line_number, r.base_text, r.diff_line_number, r.diff_text) for r in plan.rows()] == [
        (1, "a", None, None),
        (2, "b", None, None),
    ]


def test_comments_attached_to_rows():
    comments = [comment(BASE_ID, 1, "base note"), comment(DIFF_ID, 2, "diff note")]
    plan = render_pair("a\nb\n", "2c2\n< b\n---\n> B\n", comments=comments)
    first, second = plan.rows()
    assert [c.text for c in first.base_comments] == ["base note"]
    assert first.diff_comments == ()
    assert [c.text for c in second.diff_comments] == ["diff note"]
    assert [c.text for c in second.comments] == ["diff note"]


def test_elision_around_comment_in_single_file():
    comments = [comment(BASE_ID, 250)]
    plan = render_pair(numbered_text(500), "", comments=comments, diff_id=BASE_ID)
    rows = plan.rows()

    visible = visible_base_lines(plan)
    expected = list(range(1, 51)) + list(range(200, 300)) + list(range(451, 501))
    assert visible == expected

    markers = [r for r in rows if r.kind is RowKind.OMITTED]
    assert [(m.base_line_number, m.omitted_count) for m in markers] == [(51, 149), (300, 151)]
    assert sum(m.omitted_count for m in markers) + len(visible) == 500
    assert "omitted" in markers[0].message


def test_visible_lines_and_markers_never_overlap():
    comments = [comment(BASE_ID, 130), comment(BASE_ID, 140), comment(BASE_ID, 400)]
    plan = render_pair(numbered_text(600), "", comments=comments, diff_id=BASE_ID)

    covered = []
    for row in plan.rows():
        if row.kind is RowKind.OMITTED:
            covered.extend(range(row.base_line_number, row.base_line_number + row.omitted_count))
        else:
            covered.append(row.base_line_number)
    assert covered == list(range(1, 601))


def test_elision_keeps_context_next_to_changes():
    plan = render_pair(numbered_text(300), "1c1\n< line 1\n---\n> LINE 1\n")
    unchanged = plan.groups[1]
    assert unchanged.segment_type is SegmentType.UNCHANGED
    assert unchanged.segment.base_start_line == 2

    lines = [r.base_line_number for r in unchanged.rows if r.kind is RowKind.LINE]
    assert lines == list(range(2, 52)) + list(range(251, 301))
    (marker,) = [r for r in unchanged.rows if r.kind is RowKind.OMITTED]
    assert (marker.base_line_number, marker.diff_line_number, marker.omitted_count) == (52, 52, 199)


def test_diff_side_comment_anchors_elision():
    plan = render_pair(numbered_text(300), "1c1\n< line 1\n---\n> LINE 1\n", comments=[comment(DIFF_ID, 150)])
    lines = visible_base_lines(plan)
    assert 150 in lines
    assert 100 in lines
    assert 99 not in lines


def test_no_elision_when_disabled_or_short():
    plan = render_pair(numbered_text(500), "", ViewOptions(omit_unchanged_lines=False), diff_id=BASE_ID)
    assert len(plan.rows()) == 500

    plan = render_pair(numbered_text(100), "", diff_id=BASE_ID)
    assert all(r.kind is RowKind.LINE for r in plan.rows())
    assert len(plan.rows()) == 100


def test_changed_segments_are_never_elided():
    before = numbered_text(300)
    hunk_text = "1,300c1,300\n" + "".join(f"< line {i}\n" for i in range(1, 301)) + "---\n"
    hunk_text += "".join(f"> LINE {i}\n" for i in range(1, 301))
    plan = render_pair(before, hunk_text)
    assert len(plan.groups) == 1
    assert len(plan.groups[0].rows) == 300


def test_trailing_add_has_no_empty_final_group():
    plan = render_pair("a\nb\n", "2a3\n> c\n")
    assert [g.segment_type for g in plan.groups] == [SegmentType.UNCHANGED, SegmentType.ADDED]


def test_leading_add_keeps_first_line():
    plan = render_pair("a\nb\n", "0a1\n> top\n")
    assert [(r.base_line_number, r.diff_line_number) for r in plan.rows()] == [(None, 1), (1, 2), (2, 3)]


def test_rendering_is_idempotent():
    comments = [comment(BASE_ID, 120), comment(DIFF_ID, 3)]
    first = render_pair(numbered_text(400), "2c2\n< line 2\n---\n> two\n", comments=comments)
    second = render_pair(numbered_text(400), "2c2\n< line 2\n---\n> two\n", comments=comments)
    assert first == second


def test_text_goes_through_encoder():
    options = ViewOptions(tab_replacement="    ")
    plan = render_pair("if a<b:\n\treturn\n", "", options, diff_id=BASE_ID)
    assert [r.base_text for r in plan.rows()] == ["if a&lt;b:", "    return"]


def test_visible_rows_zero_context_keeps_anchor():
    assert visible_rows(5, [2], 0) == [False, False, True, False, False]
