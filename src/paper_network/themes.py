"""Theme system: color palettes, node role colors, and Textual theme builders."""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

from paper_network.models import NodeRole

DEFAULT_THEME = {
    "background": "#272822",
    "panel": "#1e1e1e",
    "panel_alt": "#3e3d32",
    "text": "#f8f8f2",
    "muted": "#75715e",
    "accent": "#66d9ef",
    "accent_alt": "#e6db74",
    "green": "#a6e22e",
    "orange": "#fd971f",
    "pink": "#f92672",
    "purple": "#ae81ff",
    "highlight": "#49483e",
    "highlight_focus": "#5a5950",
    "center_node": "#1f77b4",
    "neighbor_node": "#ff7f0e",
}

CATPPUCCIN_MOCHA_THEME: dict[str, str] = {
    "background": "#1e1e2e",
    "panel": "#181825",
    "panel_alt": "#313244",
    "text": "#cdd6f4",
    "muted": "#6c7086",
    "accent": "#89b4fa",
    "accent_alt": "#f9e2af",
    "green": "#a6e3a1",
    "orange": "#fab387",
    "pink": "#f38ba8",
    "purple": "#cba6f7",
    "highlight": "#313244",
    "highlight_focus": "#45475a",
    "center_node": "#89b4fa",
    "neighbor_node": "#fab387",
}

SOLARIZED_DARK_THEME: dict[str, str] = {
    "background": "#002b36",
    "panel": "#073642",
    "panel_alt": "#586e75",
    "text": "#839496",
    "muted": "#586e75",
    "accent": "#268bd2",
    "accent_alt": "#b58900",
    "green": "#859900",
    "orange": "#cb4b16",
    "pink": "#d33682",
    "purple": "#6c71c4",
    "highlight": "#073642",
    "highlight_focus": "#586e75",
    "center_node": "#268bd2",
    "neighbor_node": "#cb4b16",
}

THEMES: dict[str, dict[str, str]] = {
    "monokai": DEFAULT_THEME,
    "catppuccin-mocha": CATPPUCCIN_MOCHA_THEME,
    "solarized-dark": SOLARIZED_DARK_THEME,
}
THEME_NAMES: list[str] = list(THEMES.keys())

# Active palette, swapped in place when the user changes theme
THEME_COLORS = DEFAULT_THEME.copy()


def _build_textual_theme(name: str, colors: dict[str, str]) -> TextualTheme:
    """Convert an app color dict to a Textual Theme with $th-* CSS variables."""
    variables = {
        "th-background": colors["background"],
        "th-panel": colors["panel"],
        "th-panel-alt": colors["panel_alt"],
        "th-highlight": colors["highlight"],
        "th-highlight-focus": colors["highlight_focus"],
        "th-accent": colors["accent"],
        "th-accent-alt": colors["accent_alt"],
        "th-muted": colors["muted"],
        "th-text": colors["text"],
        "th-green": colors["green"],
        "th-orange": colors["orange"],
        "th-purple": colors["purple"],
        "th-pink": colors["pink"],
    }
    return TextualTheme(
        name=name,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        warning=colors["orange"],
        error=colors["pink"],
        success=colors["green"],
        dark=True,
        variables=variables,
    )


TEXTUAL_THEMES: dict[str, TextualTheme] = {
    name: _build_textual_theme(name, colors) for name, colors in THEMES.items()
}


def apply_theme_colors(theme_name: str) -> str:
    """Load ``theme_name`` into THEME_COLORS. Unknown names fall back to monokai."""
    if theme_name not in THEMES:
        theme_name = "monokai"
    THEME_COLORS.clear()
    THEME_COLORS.update(THEMES[theme_name])
    return theme_name


def next_theme_name(current: str) -> str:
    """Return the theme after ``current`` in cycling order."""
    try:
        index = THEME_NAMES.index(current)
    except ValueError:
        return THEME_NAMES[0]
    return THEME_NAMES[(index + 1) % len(THEME_NAMES)]


def role_color(role: NodeRole) -> str:
    """Return the active color for a graph node role."""
    if role is NodeRole.CENTER:
        return THEME_COLORS["center_node"]
    return THEME_COLORS["neighbor_node"]


__all__ = [
    "CATPPUCCIN_MOCHA_THEME",
    "DEFAULT_THEME",
    "SOLARIZED_DARK_THEME",
    "TEXTUAL_THEMES",
    "THEMES",
    "THEME_COLORS",
    "THEME_NAMES",
    "apply_theme_colors",
    "next_theme_name",
    "role_color",
]
