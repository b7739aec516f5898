import pytest

from pumpsim.bolus import (
    FALLBACK_BG,
    BgSource,
    BolusForm,
    InvalidInputError,
    calculate_suggested_bolus,
)
from pumpsim.cgm import CgmSimulator
from pumpsim.profiles import DEFAULT_PROFILE, UserProfile, UserProfileManager
from pumpsim.pump import PumpController
from pumpsim.records import HistoryManager, RecordType
from pumpsim.safety import BolusSafetyError, BolusSafetyManager


class FixedRng:
    def randrange(self, stop):
        return 10


def make_form(start_bg=7.0, with_cgm=True):
    history = HistoryManager()
    safety = BolusSafetyManager(clock=lambda: 0.0)
    cgm = CgmSimulator(rng=FixedRng(), start_bg=start_bg)
    manager = UserProfileManager()
    pump = PumpController(manager, history, safety, cgm)
    form = BolusForm(manager, pump, cgm if with_cgm else None)
    return form, history, safety, cgm


def test_food_only_bolus_at_target():
    p = DEFAULT_PROFILE
    result = calculate_suggested_bolus(p, p.target_glucose, 50.0, 0.0)
    assert result == pytest.approx(50.0 / p.carb_ratio)


def test_correction_and_iob():
    p = DEFAULT_PROFILE
    bg = p.target_glucose + 4.0
    result = calculate_suggested_bolus(p, bg, 0.0, 0.5)
    assert result == pytest.approx(4.0 / p.correction_factor - 0.5)


def test_no_correction_below_target_and_floor_at_zero():
    p = DEFAULT_PROFILE
    assert calculate_suggested_bolus(p, p.target_glucose - 2, 0.0, 0.0) == 0.0
    assert calculate_suggested_bolus(p, p.target_glucose, 10.0, 100.0) == 0.0


def test_zero_ratios_disable_terms():
    p = UserProfile(name="z", carb_ratio=0.0, correction_factor=0.0)
    assert calculate_suggested_bolus(p, 20.0, 100.0, 0.0) == 0.0


def test_calculate_stores_two_decimal_suggestion():
    form, _, _, _ = make_form()
    form.bg_text, form.carbs_text, form.iob_text = "6", "30", "0"
    value = form.calculate()
    assert value == pytest.approx(30 / DEFAULT_PROFILE.carb_ratio)
    assert form.suggested_text == f"{value:.2f}"


def test_invalid_manual_bg():
    form, _, _, _ = make_form()
    form.carbs_text, form.iob_text = "10", "0"
    with pytest.raises(InvalidInputError, match="valid BG"):
        form.calculate()


def test_invalid_carbs_or_iob():
    form, _, _, _ = make_form()
    form.bg_text, form.carbs_text, form.iob_text = "6", "abc", "0"
    with pytest.raises(InvalidInputError, match="Carbs/IOB"):
        form.calculate()


def test_cgm_source_fills_and_tracks_bg():
    form, _, _, cgm = make_form(start_bg=9.0)
    form.set_bg_source(BgSource.CGM)
    assert not form.bg_editable
    assert form.bg_text == "9.0"
    form.on_cgm_bg(11.26)
    assert form.bg_text == "11.3"


def test_manual_source_ignores_cgm_updates():
    form, _, _, _ = make_form()
    form.bg_text = "5.5"
    form.on_cgm_bg(12.0)
    assert form.bg_text == "5.5"
    assert form.bg_editable


def test_cgm_source_without_cgm_uses_fallback():
    form, _, _, _ = make_form(with_cgm=False)
    form.set_bg_source(BgSource.CGM)
    form.carbs_text, form.iob_text = "0", "0"
    expected = calculate_suggested_bolus(DEFAULT_PROFILE, FALLBACK_BG, 0.0, 0.0)
    assert form.calculate() == pytest.approx(expected)


def test_deliver_without_suggestion():
    form, _, _, _ = make_form()
    with pytest.raises(InvalidInputError, match="No suggested bolus"):
        form.deliver()


def test_deliver_zero_does_nothing():
    form, history, _, _ = make_form()
    form.suggested_text = "0.00"
    assert form.deliver() == 0.0
    assert len(history) == 0


def test_deliver_records_notes():
    form, history, safety, _ = make_form()
    form.bg_text, form.carbs_text, form.iob_text = "6", "20", "0"
    total = form.calculate()
    assert form.deliver() == pytest.approx(total)
    (rec,) = history.records
    assert rec.record_type is RecordType.MANUAL_BOLUS
    assert rec.notes == "Manual Bolus. BG=6, Carbs=20, IOB=0 (Immediate portion)"
    assert safety.total_daily_bolus == pytest.approx(total)


def test_deliver_extended_uses_percent_and_hours():
    form, history, _, _ = make_form()
    form.suggested_text = "5.00"
    form.extended = True
    form.extended_percent = 40
    form.extended_hours = 2
    form.deliver()
    immediate, extended = history.records
    assert immediate.insulin_amount == pytest.approx(5.0 * 0.6)
    assert extended.insulin_amount == pytest.approx(5.0 * 0.4)
    assert extended.notes == "Extended portion over 2hr"


def test_deliver_refused_by_safety():
    form, history, _, _ = make_form()
    form.suggested_text = "50.00"
    with pytest.raises(BolusSafetyError):
        form.deliver()
    assert len(history) == 0


def test_extended_option_ranges():
    form, _, _, _ = make_form()
    with pytest.raises(ValueError):
        form.extended_percent = 101
    with pytest.raises(ValueError):
        form.extended_hours = 0
    assert (form.extended_percent, form.extended_hours) == (40, 3)