from __future__ import annotations

import re

from ratiofin.ui_theme import inject_theme


def test_theme_variables_are_all_used():
    css = inject_theme()
    root = re.search(r":root\s*\{(.*?)\}", css, re.S).group(1)
    declared = set(re.findall(r"(--[\w-]+)\s*:", root))
    used = set(re.findall(r"var\((--[\w-]+)\)", css))

    assert declared
    assert declared == used


def test_theme_styles_app_widgets():
    css = inject_theme()
    for selector in (".hero", ".ratio-card", ".badge", "@media"):
        assert selector in css
