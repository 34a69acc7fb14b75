"""Catppuccin Mocha color theme for ntds-monitor diagnostics."""

from rich.theme import Theme

# Catppuccin Mocha palette (subset in use)
MOCHA = {
    "mauve": "#cba6f7",
    "red": "#f38ba8",
    "peach": "#fab387",
    "yellow": "#f9e2af",
    "green": "#a6e3a1",
    "teal": "#94e2d5",
    "sky": "#89dceb",
    "sapphire": "#74c7ec",
    "lavender": "#b4befe",
    "text": "#cdd6f4",
    "subtext0": "#a6adc8",
    "overlay0": "#6c7086",
    "surface2": "#585b70",
}

PROBE_THEME = Theme({
    # Report status
    "success": f"bold {MOCHA['green']}",
    "failure": MOCHA["red"],
    "error": MOCHA["peach"],
    "warn": MOCHA["yellow"],

    # Diagnostics
    "heading": f"bold {MOCHA['lavender']}",
    "label": MOCHA["sapphire"],
    "value": MOCHA["text"],
    "info": MOCHA["sky"],
    "dim": MOCHA["overlay0"],
    "debug": MOCHA["subtext0"],

    # Channel table
    "table.header": f"bold {MOCHA['lavender']}",
    "table.channel": MOCHA["sapphire"],
    "table.value": MOCHA["text"],
    "table.unit": MOCHA["teal"],
    "table.limit": MOCHA["subtext0"],
})
