"""Unit tests for core/utils/slug.py"""

from chatsaver.core.utils.slug import safe_filename


def test_safe_filename_replaces_reserved_characters():
    assert safe_filename('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"


def test_safe_filename_keeps_spaces_and_unicode():
    assert safe_filename("Café plans 2024") == "Café plans 2024"


def test_safe_filename_default_for_empty():
    assert safe_filename("") == "conversation"
    assert safe_filename("   ") == "conversation"
    assert safe_filename(None, default="x") == "x"
