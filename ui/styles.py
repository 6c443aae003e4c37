from rich.theme import Theme
from rich.style import Style
from rich.text import Text

from models import Theme as ThemeName

BRAND_INDIGO = "#5B5BD6"
BRAND_TEAL = "#12A594"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
WARNING_AMBER = "#F1C40F"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

# Accent colour per settings theme. Only the accent changes in the terminal.
THEME_ACCENTS = {
    ThemeName.LIGHT: BRAND_INDIGO,
    ThemeName.DARK: "#9B8AFB",
    ThemeName.OCEAN: "#0091FF",
    ThemeName.FOREST: "#30A46C",
}

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=BRAND_INDIGO, bold=True),
        "secondary": Style(color=BRAND_TEAL, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "warning": Style(color=WARNING_AMBER),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "option_label": Style(color=BRAND_TEAL, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=BRAND_INDIGO, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)


def get_accent(theme: ThemeName) -> str:
    return THEME_ACCENTS.get(theme, BRAND_INDIGO)


def get_score_style(score: float) -> Style:
    """Get color style for a 0-100 score."""
    if score >= 80:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif score >= 50:
        return Style(color=WARNING_AMBER)
    else:
        return Style(color=ERROR_RED)


def create_verdict_header(correct: bool) -> Text:
    """Create the header line for a verdict."""
    header = Text()
    if correct:
        header.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
        header.append("Correct!", Style(color=SUCCESS_GREEN, bold=True))
    else:
        header.append("✗ ", Style(color=ERROR_RED, bold=True))
        header.append("Not quite!", Style(color=ERROR_RED, bold=True))
    return header
