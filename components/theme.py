import gradio as gr

LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)
STORAGE_KEY = "theme"


def resolve_initial_theme(stored, prefers_dark=False):
    """Stored preference wins, otherwise follow the OS colour scheme"""
    if stored in THEMES:
        return stored
    return DARK if prefers_dark else LIGHT


def next_theme(theme):
    return LIGHT if theme == DARK else DARK


def theme_label(theme):
    """Button text names the mode a click switches to"""
    if theme == DARK:
        return "Toggle Theme (Light Mode)"
    return "Toggle Theme (Dark Mode)"


def initialize_theme(stored, prefers_dark):
    theme = resolve_initial_theme(stored, prefers_dark)
    return theme, gr.update(value=theme_label(theme))


def toggle_theme(theme):
    new_theme = next_theme(resolve_initial_theme(theme))
    return new_theme, gr.update(value=theme_label(new_theme))


# Runs in the browser before initialize_theme; its return values become that
# function's inputs.
READ_PREFERENCE_JS = f"""
(stored, prefersDark) => {{
    const saved = window.localStorage.getItem('{STORAGE_KEY}') || '';
    const dark = window.matchMedia && window.matchMedia('(prefers-color-scheme: dark)').matches;
    return [saved, dark];
}}
"""

APPLY_THEME_JS = f"""
(theme) => {{
    const root = document.documentElement;
    root.classList.remove('{LIGHT}', '{DARK}');
    root.classList.add(theme);
    document.body.classList.toggle('{DARK}', theme === '{DARK}');
    window.localStorage.setItem('{STORAGE_KEY}', theme);
    return theme;
}}
"""

THEME_CSS = """
:root, :root.light {
    --color-background: #f7fafc;
    --color-card: #ffffff;
    --color-text: #2d3748;
    --color-text-secondary: #4a5568;
    --color-border: #e2e8f0;
    --color-error: #e53e3e;
    --color-info: #3182ce;
    --color-accent: #667eea;
}

:root.dark {
    --color-background: #1a202c;
    --color-card: #2d3748;
    --color-text: #f7fafc;
    --color-text-secondary: #cbd5e0;
    --color-border: #4a5568;
    --color-error: #fc8181;
    --color-info: #90cdf4;
    --color-accent: #a3bffa;
}
"""
