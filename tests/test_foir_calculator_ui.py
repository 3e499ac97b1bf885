from streamlit.testing.v1 import AppTest
from core.calculators import indicative_emi


def calculator_app():
    from ui.foir_calculator import render_foir_calculator

    render_foir_calculator()


def test_calculator_classifies_entered_obligations():
    at = AppTest.from_function(calculator_app)
    at.run()
    assert at.session_state["foir_calc"]["status"] == "EXCELLENT"

    at.number_input(key="calc_income").set_value(80000.0)
    at.number_input(key="calc_existing").set_value(10000.0)
    at.number_input(key="calc_new_emi").set_value(16000.0)
    at.run()
    calc = at.session_state["foir_calc"]
    assert calc["foir_percentage"] == 32.5
    assert calc["total_obligations"] == 26000.0
    assert calc["status"] == "EXCELLENT"
    assert any("Offline estimate" in c.value for c in at.caption)


def test_calculator_flags_high_risk():
    at = AppTest.from_function(calculator_app)
    at.run()
    at.number_input(key="calc_income").set_value(30000.0)
    at.number_input(key="calc_existing").set_value(5000.0)
    at.number_input(key="calc_new_emi").set_value(17000.0)
    at.run()
    calc = at.session_state["foir_calc"]
    assert calc["foir_percentage"] == 73.33
    assert calc["acceptable"] is False


def test_calculator_derives_emi_from_loan():
    at = AppTest.from_function(calculator_app)
    at.run()
    at.checkbox(key="calc_derive").check()
    at.run()
    assert at.session_state["foir_calc"]["new_emi"] == indicative_emi("PERSONAL_LOAN", 500000.0, 60)
