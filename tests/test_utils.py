"""Tests for iamusers.utils module."""

from iamusers.terraform import make_safe_variable_name


def test_make_safe_variable_name_basic() -> None:
    assert make_safe_variable_name("alice") == "alice"
    assert make_safe_variable_name("Alice Smith") == "alice_smith"


def test_make_safe_variable_name_special_chars() -> None:
    assert make_safe_variable_name("alice.smith@example") == "alice_smith_example"
    assert make_safe_variable_name("qa+bob") == "qa_bob"


def test_make_safe_variable_name_edge_cases() -> None:
    assert make_safe_variable_name("My  Name--X") == "my_name_x"
    assert make_safe_variable_name("a__b---c  d") == "a_b_c_d"
    # Starts with digit -> prefixed
    assert make_safe_variable_name("123-bot") == "user_123_bot"


def test_make_safe_variable_name_symbols_only() -> None:
    label = make_safe_variable_name("@@")

    assert label.startswith("user_")
    assert len(label) == len("user_") + 8
    assert label == make_safe_variable_name("@@")
    assert label != make_safe_variable_name("+=")
