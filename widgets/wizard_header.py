# widgets/wizard_header.py
from __future__ import annotations
import pyfiglet
from textual.widgets import Static

_ASCII = pyfiglet.figlet_format("Provision", font="small")


class WizardHeader(Static):
    """Full-width ASCII-art header shown on every wizard screen."""

    DEFAULT_CSS = """
    WizardHeader {
        color: #38bdf8;
        text-style: bold;
        width: 100%;
        padding: 0 2;
    }
    """

    def __init__(self) -> None:
        super().__init__(_ASCII)
