from attendance_marking.core.enums import AttendanceStatus
from attendance_marking.marking.overlay import EditOverlay


def test_new_overlay_is_clean():
    overlay = EditOverlay()
    assert not overlay.is_dirty()
    assert len(overlay) == 0


def test_cycle_stages_next_status_and_keeps_advancing():
    overlay = EditOverlay()

    first = overlay.cycle("s1", AttendanceStatus.PRESENT)
    second = overlay.cycle("s1", first)

    assert first == AttendanceStatus.ABSENT
    assert second == AttendanceStatus.LATE
    assert overlay.get("s1") == AttendanceStatus.LATE
    assert overlay.is_dirty()


def test_set_all_overwrites_previous_edits():
    overlay = EditOverlay()
    overlay.stage("s1", AttendanceStatus.ABSENT)

    overlay.set_all(["s1", "s2"], AttendanceStatus.EXCUSED)

    assert overlay.status_map() == {"s1": AttendanceStatus.EXCUSED, "s2": AttendanceStatus.EXCUSED}


def test_set_all_on_no_subjects_stays_clean():
    overlay = EditOverlay()
    overlay.set_all([], AttendanceStatus.ABSENT)
    assert not overlay.is_dirty()


def test_reset_is_idempotent():
    overlay = EditOverlay()
    overlay.stage("s1", AttendanceStatus.LATE)

    overlay.reset()
    assert not overlay.is_dirty()
    overlay.reset()
    assert not overlay.is_dirty()


def test_status_map_is_a_copy():
    overlay = EditOverlay()
    overlay.stage("s1", AttendanceStatus.LATE)

    snapshot = overlay.status_map()
    snapshot["s2"] = AttendanceStatus.ABSENT

    assert "s2" not in overlay
    assert overlay.get("s2") is None


def test_unstage_removes_single_edit():
    overlay = EditOverlay()
    overlay.stage("s1", AttendanceStatus.LATE)
    overlay.unstage("s1")
    overlay.unstage("missing")
    assert not overlay.is_dirty()
