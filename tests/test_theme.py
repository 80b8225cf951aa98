from kubedeck import theme


def test_set_theme():
    try:
        theme.set_theme(page_title="Test", mode="light")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"


def test_set_theme_system_mode_skips_colour_sheet():
    try:
        theme.set_theme(page_title="Test", mode="system")
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"
