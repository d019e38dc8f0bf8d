"""QSS stylesheet and colours for QueueTimer."""

from __future__ import annotations

# ── palette ───────────────────────────────────────────────────────────────

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#CBA6F7",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
    "block":        "#3949AB",
    "block_queued": "#D84315",
}


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-size: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 8px 18px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['bg_secondary']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 16px;
        padding: 10px 32px;
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
    }}

    /* ── inputs ──────────────────────────────────── */
    QLineEdit, QSpinBox, QComboBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 8px;
        padding: 6px 10px;
    }}

    /* ── timer blocks ────────────────────────────── */
    QFrame#timerBlock {{
        background-color: {p['block']};
        border-radius: 10px;
    }}

    QFrame#timerBlock[queued="true"] {{
        background-color: {p['block_queued']};
    }}

    QFrame#timerBlock QLabel, QFrame#timerBlock QPushButton {{
        background: transparent;
        color: white;
        border: none;
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 12px;
    }}

    QProgressBar {{
        background-color: rgba(255, 255, 255, 40);
        border: none;
        border-radius: 3px;
        max-height: 6px;
    }}

    QProgressBar::chunk {{
        background-color: white;
        border-radius: 3px;
    }}

    QStatusBar {{
        color: {p['text_muted']};
        font-size: 12px;
        border-top: 1px solid {p['border']};
    }}
    """
